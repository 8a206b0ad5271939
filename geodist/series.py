"""
Series expansions in the auxiliary parameter eps.

These are the per-geodesic series (they depend on the geodesic through eps
only), truncated at sixth order. The ellipsoid-dependent series for longitude
and area live with the Ellipsoid since their coefficients are polynomials in
the third flattening and can be tabulated once per ellipsoid.

Coefficient tables are stored as flattened polynomials, highest power first,
each followed by its common denominator.
"""

__all__ = [
    'A1m1f', 'A2m1f', 'C1f', 'C1pf', 'C2f', 'astroid', 'new_coeffs', 'sin_cos_series',
    'NA1', 'NC1', 'NC1P', 'NA2', 'NC2',
]

import math
from typing import List, MutableSequence, Sequence

from geodist._const import GEODESIC_ORDER
from geodist.utils.functions import cbrt, polyval, sq

NA1 = GEODESIC_ORDER
NC1 = GEODESIC_ORDER
NC1P = GEODESIC_ORDER
NA2 = GEODESIC_ORDER
NC2 = GEODESIC_ORDER

_A1M1_COEFF = [1, 4, 64, 0, 256]

_C1_COEFF = [
    # C1[1]/eps^1, polynomial in eps2 of order 2
    -1, 6, -16, 32,
    # C1[2]/eps^2, polynomial in eps2 of order 2
    -9, 64, -128, 2048,
    # C1[3]/eps^3, polynomial in eps2 of order 1
    9, -16, 768,
    # C1[4]/eps^4, polynomial in eps2 of order 1
    3, -5, 512,
    # C1[5]/eps^5, polynomial in eps2 of order 0
    -7, 1280,
    # C1[6]/eps^6, polynomial in eps2 of order 0
    -7, 2048,
]

_C1P_COEFF = [
    # C1p[1]/eps^1, polynomial in eps2 of order 2
    205, -432, 768, 1536,
    # C1p[2]/eps^2, polynomial in eps2 of order 2
    4005, -4736, 3840, 12288,
    # C1p[3]/eps^3, polynomial in eps2 of order 1
    -225, 116, 384,
    # C1p[4]/eps^4, polynomial in eps2 of order 1
    -7173, 2695, 7680,
    # C1p[5]/eps^5, polynomial in eps2 of order 0
    3467, 7680,
    # C1p[6]/eps^6, polynomial in eps2 of order 0
    38081, 61440,
]

_A2M1_COEFF = [-11, -28, -192, 0, 256]

_C2_COEFF = [
    # C2[1]/eps^1, polynomial in eps2 of order 2
    1, 2, 16, 32,
    # C2[2]/eps^2, polynomial in eps2 of order 2
    35, 64, 384, 2048,
    # C2[3]/eps^3, polynomial in eps2 of order 1
    15, 80, 768,
    # C2[4]/eps^4, polynomial in eps2 of order 1
    7, 35, 512,
    # C2[5]/eps^5, polynomial in eps2 of order 0
    63, 1280,
    # C2[6]/eps^6, polynomial in eps2 of order 0
    77, 2048,
]


def sin_cos_series(sinp: bool, sinx: float, cosx: float, c: Sequence[float]) -> float:
    """
    Evaluate a trigonometric series with Clenshaw summation.

    Args:
        sinp:
            If True evaluate sum(c[i] * sin(2*i*x), i = 1..n), ignoring c[0];
            otherwise sum(c[i] * cos((2*i+1)*x), i = 0..n-1)

        sinx:
            sin(x)

        cosx:
            cos(x)

        c:
            The series coefficients

    Returns:
        float
    """
    k = len(c)
    n = k - (1 if sinp else 0)
    ar = 2 * (cosx - sinx) * (cosx + sinx)  # 2 * cos(2 * x)
    y1 = 0.0
    if n & 1:
        k -= 1
        y0 = c[k]
    else:
        y0 = 0.0

    n = n // 2
    while n:
        n -= 1
        k -= 1
        y1 = ar * y0 - y1 + c[k]
        k -= 1
        y0 = ar * y1 - y0 + c[k]

    if sinp:
        return 2 * sinx * cosx * y0  # sin(2 * x) * y0
    return cosx * (y0 - y1)  # cos(x) * (y0 - y1)


def _fill_sine_coeffs(eps: float, coeff: Sequence[int], order: int, c: MutableSequence[float]):
    """Fill c[1..order] from a table of eps-polynomials with eps^l factored out"""
    eps2 = sq(eps)
    d = eps
    o = 0
    for l in range(1, order + 1):
        m = (order - l) // 2  # order of polynomial in eps^2
        c[l] = d * polyval(m, coeff, o, eps2) / coeff[o + m + 1]
        o += m + 2
        d *= eps


def A1m1f(eps: float) -> float:
    """A1 - 1, the scale factor between arc length and distance"""
    m = NA1 // 2
    t = polyval(m, _A1M1_COEFF, 0, sq(eps)) / _A1M1_COEFF[m + 1]
    return (t + eps) / (1 - eps)


def C1f(eps: float, c: MutableSequence[float]):
    """Coefficients of the distance series, written to c[1..NC1]"""
    _fill_sine_coeffs(eps, _C1_COEFF, NC1, c)


def C1pf(eps: float, c: MutableSequence[float]):
    """Coefficients of the reverted distance series, written to c[1..NC1P]"""
    _fill_sine_coeffs(eps, _C1P_COEFF, NC1P, c)


def A2m1f(eps: float) -> float:
    """A2 - 1, used for the reduced length"""
    m = NA2 // 2
    t = polyval(m, _A2M1_COEFF, 0, sq(eps)) / _A2M1_COEFF[m + 1]
    return (t - eps) / (1 + eps)


def C2f(eps: float, c: MutableSequence[float]):
    """Coefficients of the reduced length series, written to c[1..NC2]"""
    _fill_sine_coeffs(eps, _C2_COEFF, NC2, c)


def new_coeffs(size: int) -> List[float]:
    """Scratch storage for a coefficient table"""
    return [0.0] * size


def astroid(x: float, y: float) -> float:
    """
    Solve k^4 + 2*k^3 - (x^2 + y^2 - 1)*k^2 - 2*y^2*k - y^2 = 0 for its positive root.

    This gives the starting guess for the inverse problem when the points are
    nearly antipodal, where the spherical approximation is useless.
    """
    p = sq(x)
    q = sq(y)
    r = (p + q - 1) / 6
    if q == 0 and r <= 0:
        # y = 0 with |x| <= 1; the root is k = 0
        return 0.0

    s = p * q / 4
    r2 = sq(r)
    r3 = r * r2
    # Vanishes on the evolute p^(1/3) + q^(1/3) = 1
    disc = s * (s + 2 * r3)
    u = r
    if disc >= 0:
        t3 = s + r3
        # Same sign as t3 so the magnitude only grows
        t3 += -math.sqrt(disc) if t3 < 0 else math.sqrt(disc)
        t = cbrt(t3)
        u += t + (r2 / t if t != 0 else 0)
    else:
        ang = math.atan2(math.sqrt(-disc), -(s + r3))
        # disc < 0 implies r < 0; this cube root avoids cancellation
        u += 2 * r * math.cos(ang / 3)

    v = math.sqrt(sq(u) + q)
    uv = q / (v - u) if u < 0 else u + v  # u + v, computed without cancellation
    w = (uv - q) / (2 * v)
    return uv / (math.sqrt(uv + sq(w)) + w)
