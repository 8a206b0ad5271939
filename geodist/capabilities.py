"""
Capability masks and flags for the geodesic solvers.

Every output a solve can produce is a Capability. The low five bits of each
member name the series expansions that output depends on, so OR-ing outputs
together also ORs together everything they need:

    >>> Capability.REDUCEDLENGTH & Capability.CAP_C2
    <Capability.CAP_C2: 4>

Solvers only evaluate the series whose bits are set, which is the whole point of
asking for less.
"""

__all__ = ['Capability', 'Flags']

from enum import IntFlag


class Capability(IntFlag):
    """Outputs (high bits) and the series they require (low bits)"""

    NONE = 0

    # Series prerequisites
    CAP_C1 = 1 << 0
    CAP_C1p = 1 << 1
    CAP_C2 = 1 << 2
    CAP_C3 = 1 << 3
    CAP_C4 = 1 << 4
    CAP_ALL = 0x1F
    OUT_ALL = 0x7F80

    # Outputs
    LATITUDE = 1 << 7
    LONGITUDE = 1 << 8 | CAP_C3
    AZIMUTH = 1 << 9
    DISTANCE = 1 << 10 | CAP_C1
    DISTANCE_IN = 1 << 11 | CAP_C1 | CAP_C1p
    REDUCEDLENGTH = 1 << 12 | CAP_C1 | CAP_C2
    GEODESICSCALE = 1 << 13 | CAP_C1 | CAP_C2
    AREA = 1 << 14 | CAP_C4

    STANDARD = LATITUDE | LONGITUDE | AZIMUTH | DISTANCE
    ALL = OUT_ALL | CAP_ALL

    @classmethod
    def required(cls, caps: int) -> 'Capability':
        """
        Expand a mask with the outputs that accompany it.

        A geodesic line always tracks latitude and azimuth (the remaining
        outputs are derived from them), and area is reported per unit of
        distance travelled so it brings DISTANCE along.

        Args:
            caps:
                A Capability mask (or plain int)

        Returns:
            Capability
        """
        caps = cls(caps) | cls.LATITUDE | cls.AZIMUTH
        if caps & cls.AREA & cls.OUT_ALL:
            caps |= cls.DISTANCE
        return caps


class Flags(IntFlag):
    """Modifiers for the direct problem and line positions"""

    NONE = 0

    # s12_a12 is an arc length on the auxiliary sphere (degrees), not a distance
    ARCMODE = 1 << 0

    # Report lon2 as lon1 + (signed, unbounded) longitude travelled
    LONG_UNROLL = 1 << 15
