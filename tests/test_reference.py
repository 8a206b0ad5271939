"""Cross-checks against the geographiclib distribution, when installed"""

import numpy as np
import pytest
from pytest import approx

from geodist import Capability, Ellipsoid, direct, inverse

geographiclib = pytest.importorskip('geographiclib.geodesic')

REFERENCE = geographiclib.Geodesic.WGS84
WGS84 = Ellipsoid.WGS84


def _random_pairs(n, seed):
    rng = np.random.default_rng(seed)
    lats = rng.uniform(-90, 90, size=(n, 2))
    lons = rng.uniform(-180, 180, size=(n, 2))
    return [
        (float(lat[0]), float(lon[0]), float(lat[1]), float(lon[1]))
        for lat, lon in zip(lats, lons)
    ]


@pytest.mark.parametrize('lat1, lon1, lat2, lon2', _random_pairs(50, 1))
def test_inverse_matches_geographiclib(lat1, lon1, lat2, lon2):
    expected = REFERENCE.Inverse(lat1, lon1, lat2, lon2, REFERENCE.ALL)
    actual = inverse(WGS84, lat1, lon1, lat2, lon2, Capability.ALL)

    assert actual.s12 == approx(expected['s12'], abs=1e-6)
    assert actual.a12 == approx(expected['a12'], abs=1e-11)
    assert actual.azi1 == approx(expected['azi1'], abs=1e-9)
    assert actual.azi2 == approx(expected['azi2'], abs=1e-9)
    assert actual.m12 == approx(expected['m12'], abs=1e-6)
    assert actual.M12 == approx(expected['M12'], abs=1e-12)
    assert actual.M21 == approx(expected['M21'], abs=1e-12)
    assert actual.S12 == approx(expected['S12'], abs=1.)


@pytest.mark.parametrize('lat1, lon1, azi1, s12', [
    (40.64, -73.78, 103.5, 1e7),
    (-32.06, 115.74, 225., 2e7),
    (0., 0., 90., 3e7),
    (89.9, 10., -30., 5e6),
    (-60., 170., 10., -8e6),
])
def test_direct_matches_geographiclib(lat1, lon1, azi1, s12):
    expected = REFERENCE.Direct(lat1, lon1, azi1, s12, REFERENCE.ALL)
    actual = direct(WGS84, lat1, lon1, azi1, s12, caps=Capability.ALL)

    assert actual.lat2 == approx(expected['lat2'], abs=1e-9)
    assert actual.lon2 == approx(expected['lon2'], abs=1e-9)
    assert actual.azi2 == approx(expected['azi2'], abs=1e-9)
    assert actual.a12 == approx(expected['a12'], abs=1e-11)
    assert actual.m12 == approx(expected['m12'], abs=1e-6)
    assert actual.S12 == approx(expected['S12'], abs=1.)


def _nearly_antipodal(n, seed):
    rng = np.random.default_rng(seed)
    cases = [(0.42408833540347857, 0., -0.4177033339819076, 179.6457088074062)]
    for _ in range(n):
        lat1 = float(rng.uniform(-60, 60))
        lat2 = -lat1 + float(rng.uniform(-0.5, 0.5))
        cases.append((lat1, 0., lat2, 180 - float(rng.uniform(0, 1.5))))
    return cases


@pytest.mark.parametrize('f', [1 / 298.257223563, 1 / 150, -1 / 150])
@pytest.mark.parametrize('lat1, lon1, lat2, lon2', _nearly_antipodal(20, 3))
def test_nearly_antipodal_matches_geographiclib(f, lat1, lon1, lat2, lon2):
    a = 6378137.
    expected = geographiclib.Geodesic(a, f).Inverse(lat1, lon1, lat2, lon2)
    actual = inverse(Ellipsoid(a, f), lat1, lon1, lat2, lon2)

    assert actual.s12 == approx(expected['s12'], abs=1e-6)
    assert actual.azi1 == approx(expected['azi1'], abs=1e-8)
    assert actual.azi2 == approx(expected['azi2'], abs=1e-8)
