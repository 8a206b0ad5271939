
from geodist._version import __version__  # noqa: F401
from geodist.utils.logging import LOGGER
from geodist.capabilities import Capability, Flags
from geodist.ellipsoid import Ellipsoid, InvalidEllipsoid, init
from geodist.geodesic import direct, direct_line, inverse, inverse_line, make_line
from geodist.line import GeodesicLine
from geodist.result import GeodesicResult
from geodist import measures
from geodist.measures import geodist, set_distance_measure


__all__ = [
    'Capability',
    'Ellipsoid',
    'Flags',
    'GeodesicLine',
    'GeodesicResult',
    'InvalidEllipsoid',
    'direct',
    'direct_line',
    'distance_meters',
    'geodist',
    'init',
    'inverse',
    'inverse_line',
    'make_line',
    'set_distance_measure',
    'LOGGER',
]


def __getattr__(name):
    # set_distance_measure rebinds the measures module global, so read it live
    if name == 'distance_meters':
        return measures.distance_meters
    raise AttributeError(f"module 'geodist' has no attribute '{name}'")
