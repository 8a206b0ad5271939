"""
Distance measure dispatch module.

Supports switching between the geodesic solver and the cheaper closed-form
approximations (Haversine on a sphere, Vincenty on the WGS84 ellipsoid, and the
cheap-ruler planar approximation). Points are (longitude, latitude) pairs in
degrees; distances are in meters.
"""

__all__ = [
    'cheap_distance', 'geodesic_distance', 'haversine_distance', 'vincenty_distance',
    'distance_meters', 'geodist', 'set_distance_measure',
]

import math
from typing import Callable, Literal, Optional, Sequence

import numpy as np

from geodist._const import (
    CHEAP_RULER_MAX_METERS, EARTH_RADIUS_METERS, WGS84_A, WGS84_B, WGS84_F
)
from geodist.capabilities import Capability
from geodist.ellipsoid import Ellipsoid
from geodist.utils.functions import ang_normalize
from geodist.utils.logging import LOGGER, warn_once

LonLat = Sequence[float]
MeasureName = Literal['haversine', 'vincenty', 'cheap', 'geodesic']


# -------------------------------------------------------------------------
# Haversine Implementation (Spherical)
# -------------------------------------------------------------------------

def haversine_distance(p1: LonLat, p2: LonLat) -> float:
    """Calculate distance using the Haversine formula (spherical earth)."""
    lon1, lat1 = math.radians(p1[0]), math.radians(p1[1])
    lon2, lat2 = math.radians(p2[0]), math.radians(p2[1])

    dlon = lon2 - lon1
    dlat = lat2 - lat1

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


# -------------------------------------------------------------------------
# Vincenty Implementation (Ellipsoidal)
# -------------------------------------------------------------------------

def vincenty_distance(p1: LonLat, p2: LonLat) -> float:
    """
    Calculate distance using Vincenty's inverse formula (WGS84 ellipsoid).
    Falls back to the geodesic solver if the iteration fails to converge, which
    happens for nearly antipodal points.
    """
    if p1[0] == p2[0] and p1[1] == p2[1]:
        return 0.0

    lon1, lat1 = math.radians(p1[0]), math.radians(p1[1])
    lon2, lat2 = math.radians(p2[0]), math.radians(p2[1])

    U1 = math.atan((1 - WGS84_F) * math.tan(lat1))
    U2 = math.atan((1 - WGS84_F) * math.tan(lat2))
    L = lon2 - lon1
    Lambda = L

    sinU1, cosU1 = math.sin(U1), math.cos(U1)
    sinU2, cosU2 = math.sin(U2), math.cos(U2)

    MAX_ITER = 200
    for _ in range(MAX_ITER):
        sinLambda, cosLambda = math.sin(Lambda), math.cos(Lambda)
        sinSigma = math.sqrt((cosU2 * sinLambda) ** 2 +
                             (cosU1 * sinU2 - sinU1 * cosU2 * cosLambda) ** 2)

        if sinSigma == 0:
            return 0.0  # Coincident points

        cosSigma = sinU1 * sinU2 + cosU1 * cosU2 * cosLambda
        sigma = math.atan2(sinSigma, cosSigma)
        sinAlpha = cosU1 * cosU2 * sinLambda / sinSigma
        cosSqAlpha = 1 - sinAlpha ** 2

        # Equatorial line: cosSqAlpha = 0
        cos2SigmaM = cosSigma - 2 * sinU1 * sinU2 / cosSqAlpha if cosSqAlpha != 0 else 0.0

        C = WGS84_F / 16 * cosSqAlpha * (4 + WGS84_F * (4 - 3 * cosSqAlpha))
        Lambda_prev = Lambda
        Lambda = L + (1 - C) * WGS84_F * sinAlpha * (
                sigma + C * sinSigma * (cos2SigmaM + C * cosSigma * (-1 + 2 * cos2SigmaM ** 2))
        )

        if abs(Lambda - Lambda_prev) < 1e-12:
            break
    else:
        LOGGER.debug(
            'Vincenty failed to converge between %s and %s; using the geodesic solver',
            p1, p2
        )
        return geodesic_distance(p1, p2)

    uSq = cosSqAlpha * (WGS84_A ** 2 - WGS84_B ** 2) / (WGS84_B ** 2)
    A = 1 + uSq / 16384 * (4096 + uSq * (-768 + uSq * (320 - 175 * uSq)))
    B = uSq / 1024 * (256 + uSq * (-128 + uSq * (74 - 47 * uSq)))
    deltaSigma = B * sinSigma * (
            cos2SigmaM + B / 4 * (
            cosSigma * (-1 + 2 * cos2SigmaM ** 2) -
            B / 6 * cos2SigmaM * (-3 + 4 * sinSigma ** 2) * (-3 + 4 * cos2SigmaM ** 2)
    )
    )

    return WGS84_B * A * (sigma - deltaSigma)


# -------------------------------------------------------------------------
# Cheap Ruler Implementation (Planar)
# -------------------------------------------------------------------------

def cheap_distance(p1: LonLat, p2: LonLat) -> float:
    """
    Calculate distance with the Mapbox cheap-ruler approximation.

    Scales longitude and latitude differences to meters using multipliers
    evaluated at the mean latitude, then takes the planar norm. Only accurate
    over short distances; a warning is logged (once) beyond 100 km.
    """
    lat = math.radians((p1[1] + p2[1]) / 2)
    cos1 = math.cos(lat)
    cos2 = 2 * cos1 * cos1 - 1
    cos3 = 2 * cos1 * cos2 - cos1
    cos4 = 2 * cos1 * cos3 - cos2
    cos5 = 2 * cos1 * cos4 - cos3

    # Meters per degree of longitude and of latitude
    kx = 1000 * (111.41513 * cos1 - 0.09455 * cos3 + 0.00012 * cos5)
    ky = 1000 * (111.13209 - 0.56605 * cos2 + 0.0012 * cos4)

    dx = ang_normalize(p1[0] - p2[0]) * kx
    dy = (p1[1] - p2[1]) * ky
    dist = math.hypot(dx, dy)

    if dist > CHEAP_RULER_MAX_METERS:
        warn_once(
            'Cheap ruler distances above %d meters are inaccurate; consider the '
            'haversine or geodesic measure (this warning will not repeat)',
            int(CHEAP_RULER_MAX_METERS)
        )
    return dist


# -------------------------------------------------------------------------
# Geodesic Implementation (Ellipsoidal, exact)
# -------------------------------------------------------------------------

def geodesic_distance(p1: LonLat, p2: LonLat) -> float:
    """
    Calculate distance by solving the inverse geodesic problem on WGS84.
    Accurate to round-off for all pairs of points, including antipodes.
    """
    return Ellipsoid.WGS84.inverse(p1[1], p1[0], p2[1], p2[0], Capability.DISTANCE).s12


# -------------------------------------------------------------------------
# Dynamic Dispatch & Configuration
# -------------------------------------------------------------------------

# Declares the distance measure in use (default geodesic)
distance_meters = geodesic_distance


_MEASURES = {
    'haversine': haversine_distance,
    'vincenty': vincenty_distance,
    'cheap': cheap_distance,
    'geodesic': geodesic_distance,
}


def _get_measure(measure: str) -> Callable[[LonLat, LonLat], float]:
    if measure not in _MEASURES:
        raise ValueError(f"Unknown measure '{measure}'. Options: {list(_MEASURES.keys())}")
    return _MEASURES[measure]


def set_distance_measure(measure: MeasureName):
    """
    Set the global distance measure used by distance_meters and geodist.

    Args:
        measure: 'haversine', 'vincenty', 'cheap' or 'geodesic'
    """
    global distance_meters

    distance_meters = _get_measure(measure)


def _as_lonlat(points) -> np.ndarray:
    """Coerce points to an (n, 2) float array of (lon, lat) rows"""
    arr = np.asarray(points, dtype=float)
    if arr.ndim == 1 and arr.shape[0] == 2:
        arr = arr.reshape(1, 2)

    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(
            f'Expected an (n, 2) array of (longitude, latitude) rows, got shape {arr.shape}'
        )
    return arr


def geodist(
    x,
    y=None,
    sequential: bool = False,
    pad: bool = False,
    measure: Optional[MeasureName] = None,
) -> np.ndarray:
    """
    Calculate pairwise or sequential distances between points.

    Args:
        x:
            An (n, 2) array-like of (longitude, latitude) rows

        y:
            (Optional) An (m, 2) array-like of (longitude, latitude) rows. If
            provided, distances are between every row of x and every row of y.

        sequential:
            If True, return the distances between consecutive rows of x. Cannot
            be combined with y.

        pad:
            With sequential, prepend a NaN so the output has one entry per row

        measure:
            (Optional) The name of the measure to use; defaults to the measure
            set by set_distance_measure

    Returns:
        An (n, n) or (n, m) matrix of distances in meters, or with sequential
        an array of n - 1 (or n, padded) distances
    """
    func = distance_meters if measure is None else _get_measure(measure)
    x = _as_lonlat(x)

    if sequential:
        if y is not None:
            raise ValueError('Sequential distances are only defined for a single set of points')

        dists = np.array(
            [func(x[i], x[i + 1]) for i in range(len(x) - 1)],
            dtype=float
        )
        if pad:
            dists = np.concatenate(([np.nan], dists))
        return dists

    if y is None:
        n = len(x)
        dists = np.zeros((n, n), dtype=float)
        for i in range(n):
            for j in range(i + 1, n):
                dists[i, j] = dists[j, i] = func(x[i], x[j])
        return dists

    y = _as_lonlat(y)
    dists = np.empty((len(x), len(y)), dtype=float)
    for i, p1 in enumerate(x):
        for j, p2 in enumerate(y):
            dists[i, j] = func(p1, p2)
    return dists
