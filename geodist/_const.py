"""
Constants declarations for geodist
"""

# WGS84 Ellipsoid Constants
WGS84_A = 6378137.0  # Equatorial radius (meters)
WGS84_F = 1 / 298.257223563  # Flattening
WGS84_B = (1 - WGS84_F) * WGS84_A

# Mean Earth Radius (approximate for Haversine)
EARTH_RADIUS_METERS = 6_371_000.0

# Beyond this the cheap ruler drifts by more than ~0.1%
CHEAP_RULER_MAX_METERS = 100_000.0

# Order of the series expansions in the third flattening / eps
GEODESIC_ORDER = 6
