"""
Solvers for the direct and inverse geodesic problems.

Both problems are solved on an auxiliary sphere: a point's latitude is replaced
by its reduced latitude beta, distance along the geodesic by the arc length
sigma, and longitude by the spherical longitude omega. The ellipsoidal
corrections are the series in geodist.series (distance, reduced length) and on
the Ellipsoid (longitude, area).

The direct problem is a GeodesicLine evaluated once. The inverse problem is a
root find for the azimuth at point 1; see _solve_alpha1.
"""

__all__ = ['direct', 'direct_line', 'inverse', 'inverse_line', 'make_line']

import math
from typing import TYPE_CHECKING, List, NamedTuple, Tuple

from geodist import series
from geodist._const import GEODESIC_ORDER
from geodist.capabilities import Capability, Flags
from geodist.line import GeodesicLine
from geodist.result import GeodesicResult
from geodist.utils.functions import (
    EPSILON, MINVAL, NAN, ang_diff, ang_normalize, ang_round, atan2d, lat_fix,
    norm2, sincosd, sq
)
from geodist.utils.logging import LOGGER

if TYPE_CHECKING:
    from geodist.ellipsoid import Ellipsoid

TINY = math.sqrt(MINVAL)
TOL0 = EPSILON
# Width of the strip near the cut where the astroid guess is skipped
TOL1 = 200 * TOL0
TOL2 = math.sqrt(TOL0)
# Bracket width below which bisection stops
TOLB = TOL0 * TOL2
XTHRESH = 1000 * TOL2

# Newton iterations before switching to pure bisection
MAXIT1 = 20
# Hard cap on total iterations; enough bisections to exhaust double precision
MAXIT2 = MAXIT1 + 53 + 10

_OUT_ALL = int(Capability.OUT_ALL)
_DISTANCE = int(Capability.DISTANCE) & _OUT_ALL
_DISTANCE_IN = int(Capability.DISTANCE_IN) & _OUT_ALL
_REDUCEDLENGTH = int(Capability.REDUCEDLENGTH) & _OUT_ALL
_GEODESICSCALE = int(Capability.GEODESICSCALE) & _OUT_ALL
_AZIMUTH = int(Capability.AZIMUTH) & _OUT_ALL
_AREA = int(Capability.AREA) & _OUT_ALL


class _Lengths(NamedTuple):
    """Distance and reduced length in units of b, plus the geodesic scales"""
    s12b: float
    m12b: float
    m0: float
    M12: float
    M21: float


class _LambdaState(NamedTuple):
    """One evaluation of the longitude difference as a function of alpha1"""
    residual: float  # lambda12(alpha1) - lam12
    salp2: float
    calp2: float
    sig12: float
    ssig1: float
    csig1: float
    ssig2: float
    csig2: float
    eps: float
    domg12: float
    dlam12: float  # d(lambda12)/d(alpha1); NaN when not requested


class _Start(NamedTuple):
    """
    Starting guess for alpha1. A non-negative sig12 means the line was short
    enough to solve outright, in which case alpha2 and dnm are also set.
    """
    sig12: float
    salp1: float
    calp1: float
    salp2: float
    calp2: float
    dnm: float


def _lengths(
    ellipsoid: 'Ellipsoid',
    eps: float,
    sig12: float,
    ssig1: float,
    csig1: float,
    dn1: float,
    ssig2: float,
    csig2: float,
    dn2: float,
    cbet1: float,
    cbet2: float,
    outmask: int,
    C1a: List[float],
    C2a: List[float],
) -> _Lengths:
    """Evaluate the distance and reduced length integrals between sig1 and sig2"""
    outmask &= _OUT_ALL
    s12b = m12b = m0 = M12 = M21 = NAN
    A1 = A2 = m0x = J12 = 0.0
    B1 = 0.0

    if outmask & (_DISTANCE | _REDUCEDLENGTH | _GEODESICSCALE):
        A1 = series.A1m1f(eps)
        series.C1f(eps, C1a)
        if outmask & (_REDUCEDLENGTH | _GEODESICSCALE):
            A2 = series.A2m1f(eps)
            series.C2f(eps, C2a)
            m0x = A1 - A2
            A2 = 1 + A2
        A1 = 1 + A1

    if outmask & _DISTANCE:
        B1 = (
            series.sin_cos_series(True, ssig2, csig2, C1a)
            - series.sin_cos_series(True, ssig1, csig1, C1a)
        )
        s12b = A1 * (sig12 + B1)
        if outmask & (_REDUCEDLENGTH | _GEODESICSCALE):
            B2 = (
                series.sin_cos_series(True, ssig2, csig2, C2a)
                - series.sin_cos_series(True, ssig1, csig1, C2a)
            )
            J12 = m0x * sig12 + (A1 * B1 - A2 * B2)
    elif outmask & (_REDUCEDLENGTH | _GEODESICSCALE):
        # Fold the two series into one, reusing C2a
        for l in range(1, series.NC2 + 1):
            C2a[l] = A1 * C1a[l] - A2 * C2a[l]
        J12 = m0x * sig12 + (
            series.sin_cos_series(True, ssig2, csig2, C2a)
            - series.sin_cos_series(True, ssig1, csig1, C2a)
        )

    if outmask & _REDUCEDLENGTH:
        m0 = m0x
        # Parenthesised products cancel exactly for coincident points
        m12b = dn2 * (csig1 * ssig2) - dn1 * (ssig1 * csig2) - csig1 * csig2 * J12

    if outmask & _GEODESICSCALE:
        csig12 = csig1 * csig2 + ssig1 * ssig2
        t = ellipsoid.ep2 * (cbet1 - cbet2) * (cbet1 + cbet2) / (dn1 + dn2)
        M12 = csig12 + (t * ssig2 - csig2 * J12) * ssig1 / dn1
        M21 = csig12 - (t * ssig1 - csig1 * J12) * ssig2 / dn2

    return _Lengths(s12b, m12b, m0, M12, M21)


def _inverse_start(  # pylint: disable=too-many-locals
    ellipsoid: 'Ellipsoid',
    sbet1: float,
    cbet1: float,
    dn1: float,
    sbet2: float,
    cbet2: float,
    dn2: float,
    lam12: float,
    slam12: float,
    clam12: float,
    C1a: List[float],
    C2a: List[float],
) -> _Start:
    """
    Guess alpha1 for the inverse problem.

    Uses the great-circle azimuth on the auxiliary sphere. For short lines that
    answer is already accurate to round-off and is returned as the solution.
    For nearly antipodal points the spherical guess is poor, and the astroid
    approximation of the geodesic envelope is used instead.
    """
    f = ellipsoid.f
    sig12 = -1.0
    salp2 = calp2 = dnm = NAN

    # bet12 = bet2 - bet1 in [0, pi); bet12a = bet2 + bet1 in (-pi, 0]
    sbet12 = sbet2 * cbet1 - cbet2 * sbet1
    cbet12 = cbet2 * cbet1 + sbet2 * sbet1
    sbet12a = sbet2 * cbet1
    sbet12a += cbet2 * sbet1

    shortline = cbet12 >= 0 and sbet12 < 0.5 and cbet2 * lam12 < 0.5
    if shortline:
        # sin((bet1 + bet2) / 2)^2
        sbetm2 = sq(sbet1 + sbet2)
        sbetm2 /= sbetm2 + sq(cbet1 + cbet2)
        dnm = math.sqrt(1 + ellipsoid.ep2 * sbetm2)
        omg12 = lam12 / (ellipsoid.f1 * dnm)
        somg12, comg12 = math.sin(omg12), math.cos(omg12)
    else:
        somg12, comg12 = slam12, clam12

    salp1 = cbet2 * somg12
    if comg12 >= 0:
        calp1 = sbet12 + cbet2 * sbet1 * sq(somg12) / (1 + comg12)
    else:
        calp1 = sbet12a - cbet2 * sbet1 * sq(somg12) / (1 - comg12)

    ssig12 = math.hypot(salp1, calp1)
    csig12 = sbet1 * sbet2 + cbet1 * cbet2 * comg12

    if shortline and ssig12 < ellipsoid.etol2:
        salp2 = cbet1 * somg12
        calp2 = sbet12 - cbet1 * sbet2 * (
            sq(somg12) / (1 + comg12) if comg12 >= 0 else 1 - comg12
        )
        salp2, calp2 = norm2(salp2, calp2)
        sig12 = math.atan2(ssig12, csig12)

    elif (
        abs(ellipsoid.n) >= 0.1
        or csig12 >= 0
        or ssig12 >= 6 * abs(ellipsoid.n) * math.pi * sq(cbet1)
    ):
        # The spherical guess is good enough (or the ellipsoid too eccentric
        # for the astroid to help)
        pass

    else:
        # Scale so the antipode sits at the origin and the cut at y = 0, x = -1
        lam12x = math.atan2(-slam12, -clam12)
        if f >= 0:
            # x = dlong, y = dlat
            k2 = sq(sbet1) * ellipsoid.ep2
            eps = k2 / (2 * (1 + math.sqrt(1 + k2)) + k2)
            lamscale = f * cbet1 * ellipsoid.A3f(eps) * math.pi
            betscale = lamscale * cbet1
            x = lam12x / lamscale
            y = sbet12a / betscale
        else:
            # x = dlat, y = dlong
            cbet12a = cbet2 * cbet1 - sbet2 * sbet1
            bet12a = math.atan2(sbet12a, cbet12a)
            lengths = _lengths(
                ellipsoid, ellipsoid.n, math.pi + bet12a, sbet1, -cbet1, dn1,
                sbet2, cbet2, dn2, cbet1, cbet2, _REDUCEDLENGTH, C1a, C2a,
            )
            x = -1 + lengths.m12b / (cbet1 * cbet2 * lengths.m0 * math.pi)
            betscale = sbet12a / x if x < -0.01 else -f * sq(cbet1) * math.pi
            lamscale = betscale / cbet1
            y = lam12x / lamscale

        if y > -TOL1 and x > -1 - XTHRESH:
            # Strip near the cut
            if f >= 0:
                salp1 = min(1.0, -x)
                calp1 = -math.sqrt(1 - sq(salp1))
            else:
                calp1 = max(0.0 if x > -TOL1 else -1.0, x)
                salp1 = math.sqrt(1 - sq(calp1))
        else:
            k = series.astroid(x, y)
            omg12a = lamscale * (-x * k / (1 + k) if f >= 0 else -y * (1 + k) / k)
            somg12, comg12 = math.sin(omg12a), -math.cos(omg12a)
            # Spherical estimate again, with omg12a in place of lam12
            salp1 = cbet2 * somg12
            calp1 = sbet12a - cbet2 * sbet1 * sq(somg12) / (1 - comg12)

    # Written so that NaN takes the first branch
    if not salp1 <= 0:
        salp1, calp1 = norm2(salp1, calp1)
    else:
        salp1, calp1 = 1.0, 0.0

    return _Start(sig12, salp1, calp1, salp2, calp2, dnm)


def _lambda12(  # pylint: disable=too-many-locals
    ellipsoid: 'Ellipsoid',
    sbet1: float,
    cbet1: float,
    dn1: float,
    sbet2: float,
    cbet2: float,
    dn2: float,
    salp1: float,
    calp1: float,
    slam120: float,
    clam120: float,
    diffp: bool,
    C1a: List[float],
    C2a: List[float],
    C3a: List[float],
) -> _LambdaState:
    """Follow the geodesic leaving point 1 at alpha1 to the latitude of point 2"""
    if sbet1 == 0 and calp1 == 0:
        # Break the degeneracy of the equatorial line
        calp1 = -TINY

    # sin(alp1) * cos(bet1) = sin(alp0)
    salp0 = salp1 * cbet1
    calp0 = math.hypot(calp1, salp1 * sbet1)

    # tan(bet1) = tan(sig1) * cos(alp1); tan(omg1) = sin(alp0) * tan(sig1)
    ssig1 = sbet1
    somg1 = salp0 * sbet1
    csig1 = comg1 = calp1 * cbet1
    ssig1, csig1 = norm2(ssig1, csig1)

    # Enforce symmetry when |bet2| = -bet1
    salp2 = salp0 / cbet2 if cbet2 != cbet1 else salp1
    # calp2 = sqrt(1 - sq(salp2)), choosing alp2 in [0, pi/2]
    if cbet2 != cbet1 or abs(sbet2) != -sbet1:
        calp2 = math.sqrt(
            sq(calp1 * cbet1)
            + ((cbet2 - cbet1) * (cbet1 + cbet2) if cbet1 < -sbet1
               else (sbet1 - sbet2) * (sbet1 + sbet2))
        ) / cbet2
    else:
        calp2 = abs(calp1)

    ssig2 = sbet2
    somg2 = salp0 * sbet2
    csig2 = comg2 = calp2 * cbet2
    ssig2, csig2 = norm2(ssig2, csig2)

    # sig12 = sig2 - sig1 in [0, pi]
    sig12 = math.atan2(
        max(0.0, csig1 * ssig2 - ssig1 * csig2),
        csig1 * csig2 + ssig1 * ssig2,
    )
    # omg12 = omg2 - omg1 in [0, pi]
    somg12 = max(0.0, comg1 * somg2 - somg1 * comg2)
    comg12 = comg1 * comg2 + somg1 * somg2
    # eta = omg12 - lam120
    eta = math.atan2(
        somg12 * clam120 - comg12 * slam120,
        comg12 * clam120 + somg12 * slam120,
    )

    k2 = sq(calp0) * ellipsoid.ep2
    eps = k2 / (2 * (1 + math.sqrt(1 + k2)) + k2)
    ellipsoid.C3f(eps, C3a)
    B312 = (
        series.sin_cos_series(True, ssig2, csig2, C3a)
        - series.sin_cos_series(True, ssig1, csig1, C3a)
    )
    domg12 = -ellipsoid.f * ellipsoid.A3f(eps) * salp0 * (sig12 + B312)
    residual = eta + domg12

    if not diffp:
        dlam12 = NAN
    elif calp2 == 0:
        dlam12 = -2 * ellipsoid.f1 * dn1 / sbet1
    else:
        dlam12 = _lengths(
            ellipsoid, eps, sig12, ssig1, csig1, dn1, ssig2, csig2, dn2,
            cbet1, cbet2, _REDUCEDLENGTH, C1a, C2a,
        ).m12b
        dlam12 *= ellipsoid.f1 / (calp2 * cbet2)

    return _LambdaState(
        residual, salp2, calp2, sig12, ssig1, csig1, ssig2, csig2, eps, domg12, dlam12
    )


def _solve_alpha1(  # pylint: disable=too-many-locals
    ellipsoid: 'Ellipsoid',
    sbet1: float,
    cbet1: float,
    dn1: float,
    sbet2: float,
    cbet2: float,
    dn2: float,
    salp1: float,
    calp1: float,
    slam12: float,
    clam12: float,
    C1a: List[float],
    C2a: List[float],
    C3a: List[float],
) -> Tuple[float, float, _LambdaState]:
    """
    Find alpha1 such that lambda12(alpha1) equals the longitude difference.

    lambda12(alpha1) - lam12 has exactly one root in (0, pi) and is increasing
    there, so a bracket [alpha1a, alpha1b] around the root is narrowed with
    every evaluation. Newton's method is used for the first MAXIT1 iterations;
    whenever its derivative is not positive or its step leaves (0, pi), the
    midpoint of the bracket is taken instead. After MAXIT1 iterations only
    bisection is used, and the loop never exceeds MAXIT2 evaluations.

    Returns:
        (salp1, calp1, state) with state the final lambda12 evaluation
    """
    numit = 0
    bisections = 0
    tripn = tripb = False
    salp1a, calp1a = TINY, 1.0
    salp1b, calp1b = TINY, -1.0

    while True:
        state = _lambda12(
            ellipsoid, sbet1, cbet1, dn1, sbet2, cbet2, dn2, salp1, calp1,
            slam12, clam12, numit < MAXIT1, C1a, C2a, C3a,
        )
        v = state.residual
        # Reversed test lets NaN escape
        if numit >= MAXIT2 or tripb or not abs(v) >= (8 if tripn else 1) * TOL0:
            break

        if v > 0 and (numit > MAXIT1 or calp1 / salp1 > calp1b / salp1b):
            salp1b, calp1b = salp1, calp1
        elif v < 0 and (numit > MAXIT1 or calp1 / salp1 < calp1a / salp1a):
            salp1a, calp1a = salp1, calp1

        if numit < MAXIT1 and state.dlam12 > 0:
            dalp1 = -v / state.dlam12
            if abs(dalp1) < math.pi:
                sdalp1, cdalp1 = math.sin(dalp1), math.cos(dalp1)
                nsalp1 = salp1 * cdalp1 + calp1 * sdalp1
                if nsalp1 > 0:
                    calp1 = calp1 * cdalp1 - salp1 * sdalp1
                    salp1 = nsalp1
                    salp1, calp1 = norm2(salp1, calp1)
                    # Convergence can be linear when the slope vanishes, so the
                    # stopping test is relaxed to a few ulps
                    tripn = abs(v) <= 16 * TOL0
                    numit += 1
                    continue

        numit += 1
        bisections += 1
        salp1 = (salp1a + salp1b) / 2
        calp1 = (calp1a + calp1b) / 2
        salp1, calp1 = norm2(salp1, calp1)
        tripn = False
        tripb = (
            abs(salp1a - salp1) + (calp1a - calp1) < TOLB
            or abs(salp1 - salp1b) + (calp1 - calp1b) < TOLB
        )

    if bisections:
        LOGGER.debug(
            'Inverse solution fell back to bisection %d time(s) in %d iteration(s) '
            '(f = %s)',
            bisections, numit, ellipsoid.f
        )

    return salp1, calp1, state


def _gen_inverse(  # pylint: disable=too-many-locals,too-many-branches,too-many-statements
    ellipsoid: 'Ellipsoid',
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    outmask: int,
) -> Tuple[float, ...]:
    """
    Solve the inverse problem.

    Returns:
        (a12, s12, salp1, calp1, salp2, calp2, m12, M12, M21, S12)
    """
    a12 = s12 = m12 = M12 = M21 = S12 = NAN
    outmask &= _OUT_ALL
    f, f1, b = ellipsoid.f, ellipsoid.f1, ellipsoid.b

    # Bring the points to the canonical configuration
    #     0 <= lon12 <= 180, -90 <= lat1 <= -0, lat1 <= lat2 <= -lat1
    # lonsign, swapp and latsign record the transformation (1 = unchanged)
    lon12, lon12s = ang_diff(lon1, lon2)
    lonsign = 1 if lon12 >= 0 else -1
    # Collapse onto the same half-meridian when very close to it
    lon12 = lonsign * ang_round(lon12)
    lon12s = ang_round((180 - lon12) - lonsign * lon12s)
    lam12 = math.radians(lon12)
    if lon12 > 90:
        slam12, clam12 = sincosd(lon12s)
        clam12 = -clam12
    else:
        slam12, clam12 = sincosd(lon12)

    # Collapse onto the equator when very close to it
    lat1 = ang_round(lat_fix(lat1))
    lat2 = ang_round(lat_fix(lat2))
    # Point 1 gets the larger |lat|; a NaN latitude becomes lat1
    swapp = -1 if abs(lat1) < abs(lat2) or math.isnan(lat2) else 1
    if swapp < 0:
        lonsign *= -1
        lat2, lat1 = lat1, lat2
    latsign = 1 if lat1 < 0 else -1
    lat1 *= latsign
    lat2 *= latsign

    sbet1, cbet1 = sincosd(lat1)
    sbet1 *= f1
    # cbet = +epsilon at the poles
    sbet1, cbet1 = norm2(sbet1, cbet1)
    cbet1 = max(TINY, cbet1)

    sbet2, cbet2 = sincosd(lat2)
    sbet2 *= f1
    sbet2, cbet2 = norm2(sbet2, cbet2)
    cbet2 = max(TINY, cbet2)

    # Force bet2 = +/-bet1 exactly when the difference vanishes; calp2 in
    # _lambda12 depends on it
    if cbet1 < -sbet1:
        if cbet2 == cbet1:
            sbet2 = math.copysign(sbet1, sbet2)
    elif abs(sbet2) == -sbet1:
        cbet2 = cbet1

    dn1 = math.sqrt(1 + ellipsoid.ep2 * sq(sbet1))
    dn2 = math.sqrt(1 + ellipsoid.ep2 * sq(sbet2))

    C1a = series.new_coeffs(series.NC1 + 1)
    C2a = series.new_coeffs(series.NC2 + 1)
    C3a = series.new_coeffs(GEODESIC_ORDER)

    s12x = m12x = NAN
    salp1 = calp1 = salp2 = calp2 = NAN
    meridian = lat1 == -90 or slam12 == 0

    if meridian:
        # Both points lie on one full meridian; the geodesic may follow it
        calp1, salp1 = clam12, slam12
        calp2, salp2 = 1.0, 0.0

        # tan(bet) = tan(sig) * cos(alp)
        ssig1, csig1 = sbet1, calp1 * cbet1
        ssig2, csig2 = sbet2, calp2 * cbet2

        sig12 = math.atan2(
            max(0.0, csig1 * ssig2 - ssig1 * csig2),
            csig1 * csig2 + ssig1 * ssig2,
        )
        s12x, m12x, _, M12, M21 = _lengths(
            ellipsoid, ellipsoid.n, sig12, ssig1, csig1, dn1, ssig2, csig2, dn2,
            cbet1, cbet2, outmask | _DISTANCE | _REDUCEDLENGTH, C1a, C2a,
        )
        # sig12 > pi/2 with m12 < 0 means the meridian is not a shortest path
        # (prolate and close to antipodal)
        if sig12 < 1 or m12x >= 0:
            if sig12 < 3 * TINY or (sig12 < TOL0 and (s12x < 0 or m12x < 0)):
                # Zero-length geodesics must not report negative lengths
                sig12 = m12x = s12x = 0.0
            m12x *= b
            s12x *= b
            a12 = math.degrees(sig12)
        else:
            meridian = False

    # somg12 > 1 marks omg12 as not yet evaluated
    somg12, comg12, omg12 = 2.0, 0.0, 0.0
    if not meridian and sbet1 == 0 and (f <= 0 or lon12s >= f * 180):
        # Along the equator
        calp1 = calp2 = 0.0
        salp1 = salp2 = 1.0
        s12x = ellipsoid.a * lam12
        sig12 = omg12 = lam12 / f1
        m12x = b * math.sin(sig12)
        if outmask & _GEODESICSCALE:
            M12 = M21 = math.cos(sig12)
        a12 = lon12 / f1

    elif not meridian:
        start = _inverse_start(
            ellipsoid, sbet1, cbet1, dn1, sbet2, cbet2, dn2,
            lam12, slam12, clam12, C1a, C2a,
        )
        sig12, salp1, calp1 = start.sig12, start.salp1, start.calp1

        if sig12 >= 0:
            # Short line, solved by the starting guess
            salp2, calp2, dnm = start.salp2, start.calp2, start.dnm
            s12x = sig12 * b * dnm
            m12x = sq(dnm) * b * math.sin(sig12 / dnm)
            if outmask & _GEODESICSCALE:
                M12 = M21 = math.cos(sig12 / dnm)
            a12 = math.degrees(sig12)
            omg12 = lam12 / (f1 * dnm)
        else:
            salp1, calp1, state = _solve_alpha1(
                ellipsoid, sbet1, cbet1, dn1, sbet2, cbet2, dn2, salp1, calp1,
                slam12, clam12, C1a, C2a, C3a,
            )
            salp2, calp2, sig12 = state.salp2, state.calp2, state.sig12

            lengthmask = outmask
            if outmask & (_REDUCEDLENGTH | _GEODESICSCALE):
                lengthmask |= _DISTANCE
            s12x, m12x, _, M12, M21 = _lengths(
                ellipsoid, state.eps, sig12, state.ssig1, state.csig1, dn1,
                state.ssig2, state.csig2, dn2, cbet1, cbet2, lengthmask, C1a, C2a,
            )
            m12x *= b
            s12x *= b
            a12 = math.degrees(sig12)
            if outmask & _AREA:
                # omg12 = lam12 - domg12
                sdomg12, cdomg12 = math.sin(state.domg12), math.cos(state.domg12)
                somg12 = slam12 * cdomg12 - clam12 * sdomg12
                comg12 = clam12 * cdomg12 + slam12 * sdomg12

    if outmask & _DISTANCE:
        s12 = 0.0 + s12x  # -0 -> 0

    if outmask & _REDUCEDLENGTH:
        m12 = 0.0 + m12x

    if outmask & _AREA:
        S12 = _inverse_area(
            ellipsoid, meridian, sbet1, cbet1, sbet2, cbet2,
            salp1, calp1, salp2, calp2, somg12, comg12, omg12,
        )
        S12 *= swapp * lonsign * latsign
        S12 += 0.0

    # Undo the canonical transformation
    if swapp < 0:
        salp2, salp1 = salp1, salp2
        calp2, calp1 = calp1, calp2
        if outmask & _GEODESICSCALE:
            M21, M12 = M12, M21

    salp1 *= swapp * lonsign
    calp1 *= swapp * latsign
    salp2 *= swapp * lonsign
    calp2 *= swapp * latsign

    return a12, s12, salp1, calp1, salp2, calp2, m12, M12, M21, S12


def _inverse_area(  # pylint: disable=too-many-locals
    ellipsoid: 'Ellipsoid',
    meridian: bool,
    sbet1: float,
    cbet1: float,
    sbet2: float,
    cbet2: float,
    salp1: float,
    calp1: float,
    salp2: float,
    calp2: float,
    somg12: float,
    comg12: float,
    omg12: float,
) -> float:
    """Area between the geodesic and the equator, in the canonical configuration"""
    # sin(alp1) * cos(bet1) = sin(alp0)
    salp0 = salp1 * cbet1
    calp0 = math.hypot(calp1, salp1 * sbet1)
    if calp0 != 0 and salp0 != 0:
        # tan(bet) = tan(sig) * cos(alp)
        ssig1, csig1 = norm2(sbet1, calp1 * cbet1)
        ssig2, csig2 = norm2(sbet2, calp2 * cbet2)
        k2 = sq(calp0) * ellipsoid.ep2
        eps = k2 / (2 * (1 + math.sqrt(1 + k2)) + k2)
        # a^2 * e^2 * cos(alp0) * sin(alp0)
        A4 = sq(ellipsoid.a) * calp0 * salp0 * ellipsoid.e2
        C4a = series.new_coeffs(GEODESIC_ORDER)
        ellipsoid.C4f(eps, C4a)
        B41 = series.sin_cos_series(False, ssig1, csig1, C4a)
        B42 = series.sin_cos_series(False, ssig2, csig2, C4a)
        S12 = A4 * (B42 - B41)
    else:
        # sig1 and sig2 are indeterminate on the equator
        S12 = 0.0

    if not meridian and somg12 > 1:
        somg12, comg12 = math.sin(omg12), math.cos(omg12)

    if not meridian and comg12 > -0.7071 and sbet2 - sbet1 < 1.75:
        # tan(alp12/2) = tan(omg12/2) * (tan(bet1/2) + tan(bet2/2))
        #     / (1 + tan(bet1/2) * tan(bet2/2))
        domg12 = 1 + comg12
        dbet1 = 1 + cbet1
        dbet2 = 1 + cbet2
        alp12 = 2 * math.atan2(
            somg12 * (sbet1 * dbet2 + sbet2 * dbet1),
            domg12 * (sbet1 * sbet2 + dbet1 * dbet2),
        )
    else:
        # alp12 = alp2 - alp1, only used in atan2
        salp12 = salp2 * calp1 - calp2 * salp1
        calp12 = calp2 * calp1 + salp2 * salp1
        # alp1 = +/-180 with alp2 = 0 must give alp12 = -180
        if salp12 == 0 and calp12 < 0:
            salp12 = TINY * calp1
            calp12 = -1.0
        alp12 = math.atan2(salp12, calp12)

    return S12 + ellipsoid.c2 * alp12


def inverse(
    ellipsoid: 'Ellipsoid',
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    caps: int = Capability.STANDARD,
) -> GeodesicResult:
    """
    Solve the inverse geodesic problem: the shortest path between two points.

    Args:
        ellipsoid:
            The Ellipsoid to solve on

        lat1, lon1:
            Point 1 (degrees); latitudes outside [-90, 90] give NaN results

        lat2, lon2:
            Point 2 (degrees)

        caps:
            The Capability mask of outputs to compute. Endpoints and a12 are
            always reported.

    Returns:
        GeodesicResult; azi1 and azi2 are in [-180, 180]. Coincident points
        report azi1 == azi2 (following the meridian).
    """
    outmask = int(caps) & _OUT_ALL
    a12, s12, salp1, calp1, salp2, calp2, m12, M12, M21, S12 = _gen_inverse(
        ellipsoid, lat1, lon1, lat2, lon2, outmask
    )

    return GeodesicResult(
        a12=a12,
        lat1=lat_fix(lat1),
        lon1=ang_normalize(lon1),
        lat2=lat_fix(lat2),
        lon2=ang_normalize(lon2),
        azi1=atan2d(salp1, calp1) if outmask & _AZIMUTH else None,
        azi2=atan2d(salp2, calp2) if outmask & _AZIMUTH else None,
        s12=s12 if outmask & _DISTANCE else None,
        m12=m12 if outmask & _REDUCEDLENGTH else None,
        M12=M12 if outmask & _GEODESICSCALE else None,
        M21=M21 if outmask & _GEODESICSCALE else None,
        S12=S12 if outmask & _AREA else None,
    )


def make_line(
    ellipsoid: 'Ellipsoid',
    lat1: float,
    lon1: float,
    azi1: float,
    caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
) -> GeodesicLine:
    """
    Set up a GeodesicLine for repeated position queries.

    Args:
        ellipsoid:
            The Ellipsoid to solve on

        lat1, lon1:
            The starting point (degrees)

        azi1:
            The azimuth at the starting point (degrees)

        caps:
            The Capability mask of quantities the line should support

    Returns:
        GeodesicLine
    """
    return GeodesicLine(ellipsoid, lat1, lon1, azi1, caps)


def direct(
    ellipsoid: 'Ellipsoid',
    lat1: float,
    lon1: float,
    azi1: float,
    s12_a12: float,
    flags: int = Flags.NONE,
    caps: int = Capability.STANDARD,
) -> GeodesicResult:
    """
    Solve the direct geodesic problem.

    Args:
        ellipsoid:
            The Ellipsoid to solve on

        lat1, lon1:
            The starting point (degrees)

        azi1:
            The azimuth at the starting point (degrees)

        s12_a12:
            The distance to travel, or with Flags.ARCMODE the arc length on the
            auxiliary sphere (degrees). May be negative.

        flags:
            Flags.ARCMODE and/or Flags.LONG_UNROLL

        caps:
            The Capability mask of outputs to compute

    Returns:
        GeodesicResult
    """
    line_caps = int(caps)
    if not flags & Flags.ARCMODE:
        line_caps |= Capability.DISTANCE_IN
    line = GeodesicLine(ellipsoid, lat1, lon1, azi1, line_caps)
    return line.position(s12_a12, flags, caps)


def direct_line(
    ellipsoid: 'Ellipsoid',
    lat1: float,
    lon1: float,
    azi1: float,
    s12_a12: float,
    flags: int = Flags.NONE,
    caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
) -> GeodesicLine:
    """
    Set up a GeodesicLine whose reference point 3 lies s12_a12 along it.

    Its s13 and a13 describe the segment, so e.g. points spaced evenly between
    1 and 3 are line.distance_position(i * line.s13 / n).

    Args:
        ellipsoid:
            The Ellipsoid to solve on

        lat1, lon1, azi1:
            The starting point and azimuth (degrees)

        s12_a12:
            Distance to point 3, or arc length with Flags.ARCMODE

        flags:
            Flags.ARCMODE selects the meaning of s12_a12

        caps:
            The Capability mask of quantities the line should support

    Returns:
        GeodesicLine
    """
    arcmode = bool(flags & Flags.ARCMODE)
    caps = int(caps)
    if not arcmode:
        caps |= Capability.DISTANCE_IN
    line = GeodesicLine(ellipsoid, lat1, lon1, azi1, caps)
    line._set_reference(arcmode, s12_a12)  # pylint: disable=protected-access
    return line


def inverse_line(
    ellipsoid: 'Ellipsoid',
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
) -> GeodesicLine:
    """
    Set up the GeodesicLine through two points, with point 3 at point 2.

    Args:
        ellipsoid:
            The Ellipsoid to solve on

        lat1, lon1:
            Point 1 (degrees)

        lat2, lon2:
            Point 2 (degrees)

        caps:
            The Capability mask of quantities the line should support

    Returns:
        GeodesicLine
    """
    a12, _, salp1, calp1, *_ = _gen_inverse(ellipsoid, lat1, lon1, lat2, lon2, 0)
    azi1 = atan2d(salp1, calp1)
    caps = int(caps)
    if caps & _DISTANCE_IN:
        # s13 is reported alongside a13
        caps |= Capability.DISTANCE
    line = GeodesicLine(ellipsoid, lat1, lon1, azi1, caps, salp1, calp1)
    line._set_reference(True, a12)  # pylint: disable=protected-access
    return line
