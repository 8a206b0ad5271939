"""
A single geodesic, set up once and queried for positions along it
"""

__all__ = ['GeodesicLine']

import math
from typing import TYPE_CHECKING, Optional, Tuple

from geodist import series
from geodist._const import GEODESIC_ORDER
from geodist.capabilities import Capability, Flags
from geodist.result import GeodesicResult
from geodist.utils.functions import (
    MINVAL, NAN, ang_normalize, ang_round, atan2d, lat_fix, norm2, sincosd, sq
)
from geodist.utils.logging import warn_once

if TYPE_CHECKING:
    from geodist.ellipsoid import Ellipsoid

TINY = math.sqrt(MINVAL)

_OUT_ALL = int(Capability.OUT_ALL)
_LATITUDE = int(Capability.LATITUDE)
_LONGITUDE = int(Capability.LONGITUDE)
_AZIMUTH = int(Capability.AZIMUTH)
_DISTANCE = int(Capability.DISTANCE)
_DISTANCE_IN = int(Capability.DISTANCE_IN)
_REDUCEDLENGTH = int(Capability.REDUCEDLENGTH)
_GEODESICSCALE = int(Capability.GEODESICSCALE)
_AREA = int(Capability.AREA)

# Reverting the distance series loses accuracy beyond this flattening, so one
# Newton step is applied to the resulting arc length
_REVERSION_NEWTON_FLATTENING = 0.01


class GeodesicLine:  # pylint: disable=too-many-instance-attributes
    """
    A geodesic starting at (lat1, lon1) with azimuth azi1.

    Everything that depends only on the starting point and azimuth (the
    equatorial azimuth alpha0 and the series coefficients selected by caps) is
    computed here, so that position() only has to evaluate the series at the
    end point. A line never changes after construction.

    Args:
        ellipsoid:
            The Ellipsoid the line lives on

        lat1:
            Latitude of point 1, in [-90, 90] (degrees)

        lon1:
            Longitude of point 1 (degrees)

        azi1:
            Azimuth at point 1 (degrees)

        caps:
            The Capability mask of quantities position() should be able to
            return. LATITUDE and AZIMUTH are always included; DISTANCE_IN is
            needed to position by distance rather than arc length.

        salp1, calp1:
            sin and cos of azi1, when already known exactly (used internally by
            inverse_line to avoid a degrees round trip)
    """

    def __init__(
        self,
        ellipsoid: 'Ellipsoid',
        lat1: float,
        lon1: float,
        azi1: float,
        caps: int = Capability.STANDARD | Capability.DISTANCE_IN,
        salp1: float = NAN,
        calp1: float = NAN,
    ):
        self.ellipsoid = ellipsoid
        self.caps = Capability.required(caps)
        caps = int(self.caps)

        self.lat1 = lat_fix(lat1)
        self.lon1 = lon1
        if math.isnan(salp1) or math.isnan(calp1):
            self.azi1 = ang_normalize(azi1)
            self.salp1, self.calp1 = sincosd(ang_round(azi1))
        else:
            self.azi1 = azi1
            self.salp1, self.calp1 = salp1, calp1

        self._s13 = NAN
        self._a13 = NAN

        f1 = ellipsoid.f1
        sbet1, cbet1 = sincosd(ang_round(self.lat1))
        sbet1 *= f1
        # cbet1 = +epsilon at the poles keeps the azimuth meaningful there
        sbet1, cbet1 = norm2(sbet1, cbet1)
        cbet1 = max(TINY, cbet1)
        self._dn1 = math.sqrt(1 + ellipsoid.ep2 * sq(sbet1))

        # sin(alp1) * cos(bet1) = sin(alp0)
        self._salp0 = self.salp1 * cbet1
        self._calp0 = math.hypot(self.calp1, self.salp1 * sbet1)

        # tan(bet1) = tan(sig1) * cos(alp1), sig = 0 at the northward equator
        # crossing; tan(omg1) = sin(alp0) * tan(sig1)
        self._ssig1 = sbet1
        self._somg1 = self._salp0 * sbet1
        self._csig1 = self._comg1 = (
            cbet1 * self.calp1 if sbet1 != 0 or self.calp1 != 0 else 1
        )
        self._ssig1, self._csig1 = norm2(self._ssig1, self._csig1)

        self._k2 = sq(self._calp0) * ellipsoid.ep2
        eps = self._k2 / (2 * (1 + math.sqrt(1 + self._k2)) + self._k2)

        if caps & Capability.CAP_C1:
            self._A1m1 = series.A1m1f(eps)
            self._C1a = series.new_coeffs(series.NC1 + 1)
            series.C1f(eps, self._C1a)
            self._B11 = series.sin_cos_series(True, self._ssig1, self._csig1, self._C1a)
            s, c = math.sin(self._B11), math.cos(self._B11)
            # tau1 = sig1 + B11
            self._stau1 = self._ssig1 * c + self._csig1 * s
            self._ctau1 = self._csig1 * c - self._ssig1 * s

        if caps & Capability.CAP_C1p:
            self._C1pa = series.new_coeffs(series.NC1P + 1)
            series.C1pf(eps, self._C1pa)

        if caps & Capability.CAP_C2:
            self._A2m1 = series.A2m1f(eps)
            self._C2a = series.new_coeffs(series.NC2 + 1)
            series.C2f(eps, self._C2a)
            self._B21 = series.sin_cos_series(True, self._ssig1, self._csig1, self._C2a)

        if caps & Capability.CAP_C3:
            self._C3a = series.new_coeffs(GEODESIC_ORDER)
            ellipsoid.C3f(eps, self._C3a)
            self._A3c = -ellipsoid.f * self._salp0 * ellipsoid.A3f(eps)
            self._B31 = series.sin_cos_series(True, self._ssig1, self._csig1, self._C3a)

        if caps & Capability.CAP_C4:
            self._C4a = series.new_coeffs(GEODESIC_ORDER)
            ellipsoid.C4f(eps, self._C4a)
            # a^2 * e^2 * cos(alp0) * sin(alp0)
            self._A4 = sq(ellipsoid.a) * self._calp0 * self._salp0 * ellipsoid.e2
            self._B41 = series.sin_cos_series(False, self._ssig1, self._csig1, self._C4a)

    def __repr__(self):
        return (
            f'<GeodesicLine(lat1={self.lat1}, lon1={self.lon1}, azi1={self.azi1}, '
            f'{self.ellipsoid!r})>'
        )

    @property
    def s13(self) -> float:
        """Distance to the reference point 3 (NaN unless built by direct_line/inverse_line)"""
        return self._s13

    @property
    def a13(self) -> float:
        """Arc length to the reference point 3, in degrees"""
        return self._a13

    def _set_reference(self, arcmode: bool, s13_a13: float):
        """Fix point 3; called once by the line factories in geodist.geodesic"""
        if arcmode:
            self._a13 = s13_a13
            self._s13 = self._gen_position(True, s13_a13, _DISTANCE)[4]
        else:
            self._s13 = s13_a13
            self._a13 = self._gen_position(False, s13_a13, 0)[0]

    def _gen_position(  # pylint: disable=too-many-locals,too-many-branches,too-many-statements
        self,
        arcmode: bool,
        s12_a12: float,
        outmask: int,
        unroll: bool = False,
    ) -> Tuple[float, ...]:
        """
        Evaluate the line at s12_a12.

        Returns:
            (a12, lat2, lon2, azi2, s12, m12, M12, M21, S12); entries not selected
            by outmask are NaN
        """
        a12 = lat2 = lon2 = azi2 = s12 = m12 = M12 = M21 = S12 = NAN
        outmask &= int(self.caps) & _OUT_ALL
        if not (arcmode or (int(self.caps) & _DISTANCE_IN & _OUT_ALL)):
            # No reverted distance series to position by distance with
            return a12, lat2, lon2, azi2, s12, m12, M12, M21, S12

        ellipsoid = self.ellipsoid
        b = ellipsoid.b
        B12 = AB1 = 0.0
        if arcmode:
            sig12 = math.radians(s12_a12)
            ssig12, csig12 = sincosd(s12_a12)
        else:
            # Distance in units of the arc on the auxiliary sphere, then revert
            tau12 = s12_a12 / (b * (1 + self._A1m1))
            s, c = math.sin(tau12), math.cos(tau12)
            # tau2 = tau1 + tau12
            B12 = -series.sin_cos_series(
                True,
                self._stau1 * c + self._ctau1 * s,
                self._ctau1 * c - self._stau1 * s,
                self._C1pa,
            )
            sig12 = tau12 - (B12 - self._B11)
            ssig12, csig12 = math.sin(sig12), math.cos(sig12)
            if abs(ellipsoid.f) > _REVERSION_NEWTON_FLATTENING:
                ssig2 = self._ssig1 * csig12 + self._csig1 * ssig12
                csig2 = self._csig1 * csig12 - self._ssig1 * ssig12
                B12 = series.sin_cos_series(True, ssig2, csig2, self._C1a)
                serr = (1 + self._A1m1) * (sig12 + (B12 - self._B11)) - s12_a12 / b
                sig12 = sig12 - serr / math.sqrt(1 + self._k2 * sq(ssig2))
                ssig12, csig12 = math.sin(sig12), math.cos(sig12)

        # sig2 = sig1 + sig12
        ssig2 = self._ssig1 * csig12 + self._csig1 * ssig12
        csig2 = self._csig1 * csig12 - self._ssig1 * ssig12
        dn2 = math.sqrt(1 + self._k2 * sq(ssig2))
        if outmask & (_DISTANCE | _REDUCEDLENGTH | _GEODESICSCALE):
            if arcmode or abs(ellipsoid.f) > _REVERSION_NEWTON_FLATTENING:
                B12 = series.sin_cos_series(True, ssig2, csig2, self._C1a)
            AB1 = (1 + self._A1m1) * (B12 - self._B11)

        # sin(bet2) = cos(alp0) * sin(sig2)
        sbet2 = self._calp0 * ssig2
        cbet2 = math.hypot(self._salp0, self._calp0 * csig2)
        if cbet2 == 0:
            # salp0 = 0 and csig2 = 0: the line passes through a pole
            cbet2 = csig2 = TINY
        # tan(alp0) = cos(sig2) * tan(alp2)
        salp2 = self._salp0
        calp2 = self._calp0 * csig2

        if outmask & _DISTANCE:
            s12 = b * ((1 + self._A1m1) * sig12 + AB1) if arcmode else s12_a12

        if outmask & _LONGITUDE:
            # tan(omg2) = sin(alp0) * tan(sig2)
            somg2 = self._salp0 * ssig2
            comg2 = csig2
            east = math.copysign(1, self._salp0)
            if unroll:
                omg12 = east * (
                    sig12
                    - (math.atan2(ssig2, csig2) - math.atan2(self._ssig1, self._csig1))
                    + (math.atan2(east * somg2, comg2)
                       - math.atan2(east * self._somg1, self._comg1))
                )
            else:
                omg12 = math.atan2(
                    somg2 * self._comg1 - comg2 * self._somg1,
                    comg2 * self._comg1 + somg2 * self._somg1,
                )
            lam12 = omg12 + self._A3c * (
                sig12 + (series.sin_cos_series(True, ssig2, csig2, self._C3a) - self._B31)
            )
            lon12 = math.degrees(lam12)
            if unroll:
                lon2 = self.lon1 + lon12
            else:
                lon2 = ang_normalize(ang_normalize(self.lon1) + ang_normalize(lon12))

        if outmask & _LATITUDE:
            lat2 = atan2d(sbet2, ellipsoid.f1 * cbet2)

        if outmask & _AZIMUTH:
            azi2 = atan2d(salp2, calp2)

        if outmask & (_REDUCEDLENGTH | _GEODESICSCALE):
            B22 = series.sin_cos_series(True, ssig2, csig2, self._C2a)
            AB2 = (1 + self._A2m1) * (B22 - self._B21)
            J12 = (self._A1m1 - self._A2m1) * sig12 + (AB1 - AB2)
            if outmask & _REDUCEDLENGTH:
                # Parenthesised products cancel exactly for coincident points
                m12 = b * (
                    (dn2 * (self._csig1 * ssig2) - self._dn1 * (self._ssig1 * csig2))
                    - self._csig1 * csig2 * J12
                )
            if outmask & _GEODESICSCALE:
                t = self._k2 * (ssig2 - self._ssig1) * (ssig2 + self._ssig1) / (self._dn1 + dn2)
                M12 = csig12 + (t * ssig2 - csig2 * J12) * self._ssig1 / self._dn1
                M21 = csig12 - (t * self._ssig1 - self._csig1 * J12) * ssig2 / dn2

        if outmask & _AREA:
            B42 = series.sin_cos_series(False, ssig2, csig2, self._C4a)
            if self._calp0 == 0 or self._salp0 == 0:
                # alp12 = alp2 - alp1, only used in atan2
                salp12 = salp2 * self.calp1 - calp2 * self.salp1
                calp12 = calp2 * self.calp1 + salp2 * self.salp1
            else:
                # tan(alp2 - alp1) from tan(alp) = tan(alp0) * sec(sig), with
                # csig1 - csig2 rewritten to avoid cancellation
                salp12 = self._calp0 * self._salp0 * (
                    self._csig1 * (1 - csig12) + ssig12 * self._ssig1 if csig12 <= 0
                    else ssig12 * (self._csig1 * ssig12 / (1 + csig12) + self._ssig1)
                )
                calp12 = sq(self._salp0) + sq(self._calp0) * self._csig1 * csig2
            S12 = ellipsoid.c2 * math.atan2(salp12, calp12) + self._A4 * (B42 - self._B41)

        a12 = s12_a12 if arcmode else math.degrees(sig12)
        return a12, lat2, lon2, azi2, s12, m12, M12, M21, S12

    def position(
        self,
        s12_a12: float,
        flags: int = Flags.NONE,
        caps: Optional[int] = None,
    ) -> GeodesicResult:
        """
        Find the point at a given distance or arc length along the line.

        Args:
            s12_a12:
                Distance from point 1 (or arc length in degrees with
                Flags.ARCMODE); may be negative

            flags:
                Flags.ARCMODE and/or Flags.LONG_UNROLL

            caps:
                The quantities to compute; defaults to everything the line was
                built to support. Quantities the line does not support are left
                unset.

        Returns:
            GeodesicResult
        """
        arcmode = bool(flags & Flags.ARCMODE)
        unroll = bool(flags & Flags.LONG_UNROLL)
        outmask = int(self.caps if caps is None else Capability(caps) & self.caps)
        if not arcmode and not int(self.caps) & _DISTANCE_IN & _OUT_ALL:
            warn_once(
                'GeodesicLine was built without Capability.DISTANCE_IN; positions by '
                'distance are undefined (this warning will not repeat)'
            )

        a12, lat2, lon2, azi2, s12, m12, M12, M21, S12 = self._gen_position(
            arcmode, s12_a12, outmask, unroll
        )

        outmask &= _OUT_ALL
        return GeodesicResult(
            a12=a12,
            lat1=self.lat1,
            lon1=self.lon1 if unroll else ang_normalize(self.lon1),
            azi1=self.azi1,
            lat2=lat2 if outmask & _LATITUDE else None,
            lon2=lon2 if outmask & _LONGITUDE & _OUT_ALL else None,
            azi2=azi2 if outmask & _AZIMUTH else None,
            s12=(s12 if arcmode else s12_a12) if outmask & _DISTANCE & _OUT_ALL else None,
            m12=m12 if outmask & _REDUCEDLENGTH & _OUT_ALL else None,
            M12=M12 if outmask & _GEODESICSCALE & _OUT_ALL else None,
            M21=M21 if outmask & _GEODESICSCALE & _OUT_ALL else None,
            S12=S12 if outmask & _AREA & _OUT_ALL else None,
        )

    def distance_position(self, s12: float, flags: int = Flags.NONE) -> GeodesicResult:
        """Position at a distance s12 from point 1"""
        return self.position(s12, flags & ~Flags.ARCMODE)

    def arc_position(self, a12: float, flags: int = Flags.NONE) -> GeodesicResult:
        """Position at an arc length a12 (degrees) from point 1"""
        return self.position(a12, flags | Flags.ARCMODE)
