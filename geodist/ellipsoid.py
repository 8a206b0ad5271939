"""
The ellipsoid of revolution on which geodesics are computed
"""

__all__ = ['Ellipsoid', 'InvalidEllipsoid', 'init']

import math
from typing import List, MutableSequence

from geodist._const import GEODESIC_ORDER, WGS84_A, WGS84_F
from geodist.capabilities import Capability, Flags
from geodist.utils.functions import EPSILON, polyval, sq
from geodist.utils.logging import warn_once

NA3 = GEODESIC_ORDER
NA3X = NA3
NC3 = GEODESIC_ORDER
NC3X = (NC3 * (NC3 - 1)) // 2
NC4 = GEODESIC_ORDER
NC4X = (NC4 * (NC4 + 1)) // 2

# Flattening beyond which results lose round-off accuracy
_ACCURATE_FLATTENING = 1 / 50

_A3_COEFF = [
    # A3, coeff of eps^5, polynomial in n of order 0
    -3, 128,
    # A3, coeff of eps^4, polynomial in n of order 1
    -2, -3, 64,
    # A3, coeff of eps^3, polynomial in n of order 2
    -1, -3, -1, 16,
    # A3, coeff of eps^2, polynomial in n of order 2
    3, -1, -2, 8,
    # A3, coeff of eps^1, polynomial in n of order 1
    1, -1, 2,
    # A3, coeff of eps^0, polynomial in n of order 0
    1, 1,
]

_C3_COEFF = [
    # C3[1], coeff of eps^5, polynomial in n of order 0
    3, 128,
    # C3[1], coeff of eps^4, polynomial in n of order 1
    2, 5, 128,
    # C3[1], coeff of eps^3, polynomial in n of order 2
    -1, 3, 3, 64,
    # C3[1], coeff of eps^2, polynomial in n of order 2
    -1, 0, 1, 8,
    # C3[1], coeff of eps^1, polynomial in n of order 1
    -1, 1, 4,
    # C3[2], coeff of eps^5, polynomial in n of order 0
    5, 256,
    # C3[2], coeff of eps^4, polynomial in n of order 1
    1, 3, 128,
    # C3[2], coeff of eps^3, polynomial in n of order 2
    -3, -2, 3, 64,
    # C3[2], coeff of eps^2, polynomial in n of order 2
    1, -3, 2, 32,
    # C3[3], coeff of eps^5, polynomial in n of order 0
    7, 512,
    # C3[3], coeff of eps^4, polynomial in n of order 1
    -10, 9, 384,
    # C3[3], coeff of eps^3, polynomial in n of order 2
    5, -9, 5, 192,
    # C3[4], coeff of eps^5, polynomial in n of order 0
    7, 512,
    # C3[4], coeff of eps^4, polynomial in n of order 1
    -14, 7, 512,
    # C3[5], coeff of eps^5, polynomial in n of order 0
    21, 2560,
]

_C4_COEFF = [
    # C4[0], coeff of eps^5, polynomial in n of order 0
    97, 15015,
    # C4[0], coeff of eps^4, polynomial in n of order 1
    1088, 156, 45045,
    # C4[0], coeff of eps^3, polynomial in n of order 2
    -224, -4784, 1573, 45045,
    # C4[0], coeff of eps^2, polynomial in n of order 3
    -10656, 14144, -4576, -858, 45045,
    # C4[0], coeff of eps^1, polynomial in n of order 4
    64, 624, -4576, 6864, -3003, 15015,
    # C4[0], coeff of eps^0, polynomial in n of order 5
    100, 208, 572, 3432, -12012, 30030, 45045,
    # C4[1], coeff of eps^5, polynomial in n of order 0
    1, 9009,
    # C4[1], coeff of eps^4, polynomial in n of order 1
    -2944, 468, 135135,
    # C4[1], coeff of eps^3, polynomial in n of order 2
    5792, 1040, -1287, 135135,
    # C4[1], coeff of eps^2, polynomial in n of order 3
    5952, -11648, 9152, -2574, 135135,
    # C4[1], coeff of eps^1, polynomial in n of order 4
    -64, -624, 4576, -6864, 3003, 135135,
    # C4[2], coeff of eps^5, polynomial in n of order 0
    8, 10725,
    # C4[2], coeff of eps^4, polynomial in n of order 1
    1856, -936, 225225,
    # C4[2], coeff of eps^3, polynomial in n of order 2
    -8448, 4992, -1144, 225225,
    # C4[2], coeff of eps^2, polynomial in n of order 3
    -1440, 4160, -4576, 1716, 225225,
    # C4[3], coeff of eps^5, polynomial in n of order 0
    -136, 63063,
    # C4[3], coeff of eps^4, polynomial in n of order 1
    1024, -208, 105105,
    # C4[3], coeff of eps^3, polynomial in n of order 2
    3584, -3328, 1144, 315315,
    # C4[4], coeff of eps^5, polynomial in n of order 0
    -128, 135135,
    # C4[4], coeff of eps^4, polynomial in n of order 1
    -2560, 832, 405405,
    # C4[5], coeff of eps^5, polynomial in n of order 0
    128, 99099,
]


class InvalidEllipsoid(ValueError):
    """Raised when an ellipsoid cannot be built from the given axes"""


class Ellipsoid:
    """
    An ellipsoid of revolution, described by its equatorial radius and flattening.

    All derived constants and the longitude/area series tables are computed once
    here; instances are immutable and may be shared freely between solves and
    threads.

    Args:
        a:
            The equatorial radius, in whatever linear unit results should be
            reported in (conventionally meters)

        f:
            The flattening. Zero is a sphere, negative values describe a prolate
            ellipsoid. Results are accurate to round-off for |f| < 1/50 and
            usable up to about |f| < 1/5.

    Raises:
        InvalidEllipsoid:
            if a is not positive and finite, or if f >= 1 (no polar semi-axis)
    """

    __slots__ = (
        'a', 'f', 'f1', 'e2', 'ep2', 'n', 'b', 'c2', 'etol2',
        '_A3x', '_C3x', '_C4x',
    )

    WGS84: 'Ellipsoid'

    def __init__(self, a: float, f: float):
        a, f = float(a), float(f)
        if not (math.isfinite(a) and a > 0):
            raise InvalidEllipsoid(f'Equatorial radius must be positive, got {a}')

        f1 = 1 - f
        b = a * f1
        if not (math.isfinite(b) and b > 0):
            raise InvalidEllipsoid(f'Polar semi-axis must be positive, got {b} (f = {f})')

        if abs(f) > _ACCURATE_FLATTENING:
            warn_once(
                'Flattening %s exceeds 1/50 in magnitude; geodesic results will not '
                'be accurate to round-off (this warning will not repeat)',
                f
            )

        e2 = f * (2 - f)
        ep2 = e2 / sq(f1)
        n = f / (2 - f)
        if e2 == 0:
            c2 = sq(a)
        elif e2 > 0:
            c2 = (sq(a) + sq(b) * math.atanh(math.sqrt(e2)) / math.sqrt(e2)) / 2
        else:
            c2 = (sq(a) + sq(b) * math.atan(math.sqrt(-e2)) / math.sqrt(-e2)) / 2

        # Short-line threshold for the inverse problem; scales so the error in
        # the spherical approximation stays below round-off
        etol2 = 0.1 * math.sqrt(EPSILON) / math.sqrt(
            max(0.001, abs(f)) * min(1.0, 1 - f / 2) / 2
        )

        self._freeze(
            a=a, f=f, f1=f1, e2=e2, ep2=ep2, n=n, b=b, c2=c2, etol2=etol2,
            _A3x=_a3_table(n), _C3x=_c3_table(n), _C4x=_c4_table(n),
        )

    def _freeze(self, **attrs):
        for key, value in attrs.items():
            object.__setattr__(self, key, value)

    def __setattr__(self, key, value):
        raise AttributeError(f'{type(self).__name__} is immutable')

    def __delattr__(self, key):
        raise AttributeError(f'{type(self).__name__} is immutable')

    def __eq__(self, other):
        if not isinstance(other, Ellipsoid):
            return False

        return self.a == other.a and self.f == other.f

    def __hash__(self):
        return hash((self.a, self.f))

    def __repr__(self):
        return f'<Ellipsoid(a={self.a}, f={self.f})>'

    def __reduce__(self):
        return Ellipsoid, (self.a, self.f)

    def A3f(self, eps: float) -> float:  # pylint: disable=invalid-name
        """Evaluate the A3 series, the secular term of the longitude integral"""
        return polyval(NA3 - 1, self._A3x, 0, eps)

    def C3f(self, eps: float, c: MutableSequence[float]):  # pylint: disable=invalid-name
        """Evaluate the C3 coefficients into c[1..NC3-1]"""
        mult = 1.0
        o = 0
        for l in range(1, NC3):
            m = NC3 - l - 1  # order of polynomial in eps
            mult *= eps
            c[l] = mult * polyval(m, self._C3x, o, eps)
            o += m + 1

    def C4f(self, eps: float, c: MutableSequence[float]):  # pylint: disable=invalid-name
        """Evaluate the C4 (area) coefficients into c[0..NC4-1]"""
        mult = 1.0
        o = 0
        for l in range(NC4):
            m = NC4 - l - 1  # order of polynomial in eps
            c[l] = mult * polyval(m, self._C4x, o, eps)
            o += m + 1
            mult *= eps

    def direct(
        self,
        lat1: float,
        lon1: float,
        azi1: float,
        s12_a12: float,
        flags: int = Flags.NONE,
        caps: int = Capability.STANDARD,
    ):
        """Solve the direct problem on this ellipsoid; see geodist.geodesic.direct"""
        return geodesic.direct(self, lat1, lon1, azi1, s12_a12, flags, caps)

    def inverse(
        self,
        lat1: float,
        lon1: float,
        lat2: float,
        lon2: float,
        caps: int = Capability.STANDARD,
    ):
        """Solve the inverse problem on this ellipsoid; see geodist.geodesic.inverse"""
        return geodesic.inverse(self, lat1, lon1, lat2, lon2, caps)

    def line(
        self,
        lat1: float,
        lon1: float,
        azi1: float,
        caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
    ):
        """Create a GeodesicLine on this ellipsoid; see geodist.geodesic.make_line"""
        return geodesic.make_line(self, lat1, lon1, azi1, caps)

    def direct_line(
        self,
        lat1: float,
        lon1: float,
        azi1: float,
        s12_a12: float,
        flags: int = Flags.NONE,
        caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
    ):
        """Line from a direct problem; see geodist.geodesic.direct_line"""
        return geodesic.direct_line(self, lat1, lon1, azi1, s12_a12, flags, caps)

    def inverse_line(
        self,
        lat1: float,
        lon1: float,
        lat2: float,
        lon2: float,
        caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
    ):
        """Line through two points; see geodist.geodesic.inverse_line"""
        return geodesic.inverse_line(self, lat1, lon1, lat2, lon2, caps)


def _a3_table(n: float) -> List[float]:
    """Coefficients of A3 in powers of eps, each a polynomial in n"""
    table = []
    o = 0
    for j in range(NA3 - 1, -1, -1):  # coeff of eps^j
        m = min(NA3 - j - 1, j)  # order of polynomial in n
        table.append(polyval(m, _A3_COEFF, o, n) / _A3_COEFF[o + m + 1])
        o += m + 2
    return table


def _c3_table(n: float) -> List[float]:
    """Coefficients of C3[l] in powers of eps, each a polynomial in n"""
    table = []
    o = 0
    for l in range(1, NC3):
        for j in range(NC3 - 1, l - 1, -1):  # coeff of eps^j
            m = min(NC3 - j - 1, j)  # order of polynomial in n
            table.append(polyval(m, _C3_COEFF, o, n) / _C3_COEFF[o + m + 1])
            o += m + 2
    return table


def _c4_table(n: float) -> List[float]:
    """Coefficients of C4[l] in powers of eps, each a polynomial in n"""
    table = []
    o = 0
    for l in range(NC4):
        for j in range(NC4 - 1, l - 1, -1):  # coeff of eps^j
            m = NC4 - j - 1  # order of polynomial in n
            table.append(polyval(m, _C4_COEFF, o, n) / _C4_COEFF[o + m + 1])
            o += m + 2
    return table


def init(a: float, f: float) -> Ellipsoid:
    """
    Build an Ellipsoid.

    Args:
        a:
            The equatorial radius

        f:
            The flattening

    Returns:
        Ellipsoid
    """
    return Ellipsoid(a, f)


Ellipsoid.WGS84 = Ellipsoid(WGS84_A, WGS84_F)

# Imported last; geodist.geodesic only needs Ellipsoid for type checking
from geodist import geodesic  # noqa: E402  pylint: disable=wrong-import-position
