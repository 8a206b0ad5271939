"""
Module for the small numerical helpers shared by the geodesic routines.

Angles are in degrees unless a name says otherwise. Several of these functions
exist purely to control round-off: they reduce arguments exactly before calling
into the trigonometric functions so that, e.g., sincosd(90) returns exactly (1, 0).
"""

__all__ = [
    'ang_diff', 'ang_normalize', 'ang_round', 'atan2d', 'cbrt', 'lat_fix',
    'norm2', 'polyval', 'sincosd', 'sq', 'sum_error',
    'DIGITS', 'EPSILON', 'MINVAL', 'NAN',
]

import math
from typing import Sequence, Tuple

DIGITS = 53
EPSILON = math.pow(2.0, 1 - DIGITS)
MINVAL = math.pow(2.0, -1022)
NAN = math.nan


def sq(x: float) -> float:
    return x * x


def cbrt(x: float) -> float:
    """Real cube root"""
    return math.copysign(math.pow(abs(x), 1 / 3.0), x)


def norm2(x: float, y: float) -> Tuple[float, float]:
    """Scale (x, y) to unit length"""
    r = math.hypot(x, y)
    return x / r, y / r


def sum_error(u: float, v: float) -> Tuple[float, float]:
    """
    Error-free sum of two floats.

    Args:
        u:
            The first addend

        v:
            The second addend

    Returns:
        (s, t) where s is the rounded sum and t the exact round-off, so that
        s + t == u + v exactly
    """
    s = u + v
    up = s - v
    vpp = s - up
    up -= u
    vpp -= v
    t = -(up + vpp)
    return s, t


def polyval(order: int, coeffs: Sequence[float], start: int, x: float) -> float:
    """
    Evaluate a polynomial with Horner's method.

    Args:
        order:
            The order of the polynomial; a negative order evaluates to zero

        coeffs:
            The coefficient table, highest power first

        start:
            The index into coeffs of the leading coefficient

        x:
            The value at which to evaluate

    Returns:
        float
    """
    y = float(0 if order < 0 else coeffs[start])
    while order > 0:
        order -= 1
        start += 1
        y = y * x + coeffs[start]
    return y


def ang_round(x: float) -> float:
    """
    Round an angle so that tiny values collapse onto 1/16 deg granularity of their
    offset from zero. Makes angles within about 1e-15 of 0 exactly 0, which lets
    nearly-equatorial and nearly-meridional input take the exact special-case paths.
    """
    z = 1 / 16.0
    if x == 0:
        return 0.0
    y = abs(x)
    # z - (z - y) must not be simplified to y
    y = z - (z - y) if y < z else y
    return -y if x < 0 else y


def _remainder(x: float, y: float) -> float:
    """IEEE remainder of x/y in [-y/2, y/2]; NaN for non-finite x"""
    return math.remainder(x, y) if math.isfinite(x) else NAN


def ang_normalize(x: float) -> float:
    """Reduce an angle to the range (-180, 180]"""
    y = _remainder(x, 360)
    return 180.0 if y == -180 else y


def lat_fix(x: float) -> float:
    """Replace latitudes outside [-90, 90] with NaN"""
    return NAN if abs(x) > 90 else x


def ang_diff(x: float, y: float) -> Tuple[float, float]:
    """
    Exact difference y - x of two angles, reduced to (-180, 180].

    Returns:
        (d, e) where d + e is the difference, e being the round-off
    """
    d, t = sum_error(ang_normalize(-x), ang_normalize(y))
    d = ang_normalize(d)
    return sum_error(-180.0 if d == 180 and t > 0 else d, t)


def sincosd(x: float) -> Tuple[float, float]:
    """
    Sine and cosine of an angle in degrees, exact at multiples of 90.

    Returns:
        (sin(x), cos(x))
    """
    r = math.fmod(x, 360) if math.isfinite(x) else NAN
    q = 0 if math.isnan(r) else int(round(r / 90))
    r -= 90 * q
    r = math.radians(r)
    s, c = math.sin(r), math.cos(r)
    q = q % 4
    if q == 1:
        s, c = c, -s
    elif q == 2:
        s, c = -s, -c
    elif q == 3:
        s, c = -c, s

    # Drop the sign of -0.0 except for sin(-0.0)
    if x == 0:
        return math.copysign(0.0, x), c + 0.0
    return s + 0.0, c + 0.0


def atan2d(y: float, x: float) -> float:
    """
    atan2 in degrees, result in [-180, 180].

    The arguments are rearranged so that atan2 itself works in [-45, 45], which
    avoids round-off when converting to degrees.
    """
    if abs(y) > abs(x):
        q = 2
        x, y = y, x
    else:
        q = 0

    if x < 0:
        q += 1
        x = -x

    ang = math.degrees(math.atan2(y, x))
    if q == 1:
        ang = math.copysign(180, y) - ang
    elif q == 2:
        ang = 90 - ang
    elif q == 3:
        ang = -90 + ang
    return ang
