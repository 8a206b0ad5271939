"""
Container for the output of a geodesic solve
"""

__all__ = ['GeodesicResult']

from dataclasses import dataclass, fields
from typing import Dict, Optional


@dataclass(frozen=True)
class GeodesicResult:  # pylint: disable=too-many-instance-attributes
    """
    The quantities computed by a direct or inverse solve, or a line position.

    Only the fields whose capability was requested are populated; everything else
    is None (never zero). a12, the arc length on the auxiliary sphere in degrees,
    is always present.

    Attributes:
        lat1, lon1, azi1:
            Point 1 and the azimuth there (degrees)

        lat2, lon2, azi2:
            Point 2 and the forward azimuth there (degrees)

        s12:
            Distance from point 1 to point 2, in the unit of the ellipsoid's
            equatorial radius

        a12:
            Arc length from point 1 to point 2 (degrees)

        m12:
            Reduced length of the geodesic

        M12, M21:
            Geodesic scales of point 2 relative to point 1 and vice versa

        S12:
            Area between the geodesic and the equator (unit squared)
    """
    a12: float
    lat1: Optional[float] = None
    lon1: Optional[float] = None
    azi1: Optional[float] = None
    lat2: Optional[float] = None
    lon2: Optional[float] = None
    azi2: Optional[float] = None
    s12: Optional[float] = None
    m12: Optional[float] = None
    M12: Optional[float] = None  # pylint: disable=invalid-name
    M21: Optional[float] = None  # pylint: disable=invalid-name
    S12: Optional[float] = None  # pylint: disable=invalid-name

    def __getitem__(self, key: str) -> float:
        value = getattr(self, key, None) if key in self._field_names() else None
        if value is None:
            raise KeyError(key)
        return value

    @classmethod
    def _field_names(cls):
        return {x.name for x in fields(cls)}

    @property
    def is_shortest(self) -> bool:
        """False when |a12| exceeds 180 degrees, i.e. the geodesic is not a shortest path"""
        return abs(self.a12) <= 180

    def to_dict(self) -> Dict[str, float]:
        """The populated fields as a dict, in the style of geographiclib's results"""
        return {
            x.name: getattr(self, x.name)
            for x in fields(self)
            if getattr(self, x.name) is not None
        }
