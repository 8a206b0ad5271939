import math

import numpy as np
import pytest
from pytest import approx

from geodist import Capability, Ellipsoid, Flags, geodesic
from geodist.geodesic import *
from geodist.measures import haversine_distance

from tests.functions import assert_azimuth_close, assert_result_close

WGS84 = Ellipsoid.WGS84


def test_inverse_wellington_salamanca():
    res = inverse(WGS84, -41.32, 174.81, 40.96, -5.50)
    assert res.s12 == approx(19959679.267353880, abs=1e-6)
    assert res.azi1 == approx(161.067669986160, abs=1e-9)
    assert res.azi2 == approx(18.825195123247, abs=1e-9)
    assert res.is_shortest

    res = inverse(WGS84, -(41 + 19 / 60), 174 + 49 / 60, 40 + 58 / 60, -(5 + 30 / 60))
    assert res.s12 == approx(19960543.857179, abs=1e-5)
    assert res.azi1 == approx(160.39137649664, abs=1e-9)
    assert res.azi2 == approx(19.50042925176, abs=1e-9)


def test_direct_perth():
    res = direct(WGS84, -32.06, 115.74, 225, 20e6)
    assert res.lat2 == approx(32.11195529, abs=1e-8)
    assert res.lon2 == approx(-63.95925278, abs=1e-8)


def test_inverse_jfk_cdg():
    res = inverse(WGS84, 40.6, -73.8, 49.01666667, 2.55)
    assert_result_close(res, {'azi1': 53.47022, 'azi2': 111.59367, 's12': 5853226})


def test_direct_jfk_cdg():
    res = direct(WGS84, 40.63972222, -73.77888889, 53.5, 5850e3)
    assert_result_close(res, {'lat2': 49.01467, 'lon2': 2.56106, 'azi2': 111.62947})


def test_scenario_round_trip_jfk():
    res = direct(WGS84, 40.64, -73.78, 45.0, 10_000_000)
    back = inverse(WGS84, 40.64, -73.78, res.lat2, res.lon2)
    assert back.s12 == approx(10_000_000, abs=1e-4)
    assert back.azi1 == approx(45.0, abs=1e-9)


def test_scenario_jfk_singapore():
    res = inverse(WGS84, 40.64, -73.78, 1.36, 103.99)
    assert 1.52e7 < res.s12 < 1.54e7
    assert -180 <= res.azi1 <= 180
    assert -180 <= res.azi2 <= 180


def test_inverse_nearly_antipodal():
    cases = [
        ((88.202499451857, 0, -88.202499451857, 179.981022032992859592), 20003898.214),
        ((89.262080389218, 0, -89.262080389218, 179.992207982775375662), 20003925.854),
        ((89.333123580033, 0, -89.333123580032997687, 179.99295812360148422), 20003926.881),
        ((56.320923501171, 0, -56.320923501171, 179.664747671772880215), 19993558.287),
        ((52.784459512564, 0, -52.784459512563990912, 179.634407464943777557), 19991596.095),
        ((48.522876735459, 0, -48.52287673545898293, 179.599720456223079643), 19989144.774),
    ]
    for args, expected in cases:
        assert inverse(WGS84, *args).s12 == approx(expected, abs=0.5e-3)

    res = inverse(WGS84, 27.2, 0.0, -27.1, 179.5)
    assert res.s12 == approx(19974354.765767, abs=1e-5)
    assert res.azi1 == approx(45.82468716758, abs=1e-9)
    assert res.azi2 == approx(134.22776532670, abs=1e-9)


def _assert_consistent(ellipsoid, lat1, lon1, lat2, lon2):
    """The inverse solution is a shortest geodesic that leads back to point 2"""
    res = inverse(ellipsoid, lat1, lon1, lat2, lon2, Capability.ALL)
    assert math.isfinite(res.s12)
    # A shortest geodesic ends before its conjugate point
    assert res.m12 > -1e-3

    end = direct(ellipsoid, lat1, lon1, res.azi1, res.s12)
    assert end.lat2 == approx(lat2, abs=1e-8)
    assert_azimuth_close(end.lon2, lon2, abs_tol=1e-8)
    assert_azimuth_close(end.azi2, res.azi2, abs_tol=1e-8)

    rev = inverse(ellipsoid, lat2, lon2, lat1, lon1)
    assert rev.s12 == approx(res.s12, abs=1e-6)


def test_inverse_nearly_antipodal_astroid_start():
    # Starting guess comes from the astroid with a negative resolvent root
    _assert_consistent(WGS84, 0.42408833540347857, 0, -0.4177033339819076, 179.6457088074062)


@pytest.mark.parametrize('ellipsoid', [
    WGS84,
    Ellipsoid(6.4e6, 1 / 150),
    Ellipsoid(6.4e6, -1 / 150),
])
def test_inverse_nearly_antipodal_sweep(ellipsoid):
    rng = np.random.default_rng(29)
    for _ in range(200):
        lat1 = rng.uniform(-60, 60)
        lat2 = -lat1 + rng.uniform(-0.5, 0.5)
        lon2 = 180 - rng.uniform(0, 1.5)
        _assert_consistent(ellipsoid, lat1, 0., lat2, lon2)


def test_newton_iteration_budget(monkeypatch):
    # Residual never converges but the slope stays positive, so every one of
    # the Newton iterations takes a small step before bisection starts
    alphas = []

    def fake_lambda12(ellipsoid, sbet1, cbet1, dn1, sbet2, cbet2, dn2, salp1, calp1, *args):
        alphas.append(math.atan2(salp1, calp1))
        return geodesic._LambdaState(1., 0., 1., 0., 0., 1., 0., 1., 0., 0., 1e9)

    monkeypatch.setattr(geodesic, '_lambda12', fake_lambda12)
    s = math.sqrt(0.5)
    geodesic._solve_alpha1(WGS84, 0., 1., 1., 0., 1., 1., s, s, 0., -1., [], [], [])

    newton_steps = 0
    for prev, nxt in zip(alphas, alphas[1:]):
        if abs(nxt - prev) > 1e-6:
            break
        newton_steps += 1

    assert newton_steps == geodesic.MAXIT1
    assert len(alphas) <= geodesic.MAXIT2 + 1


def test_inverse_very_short():
    res = inverse(WGS84, 36.493349428792, 0, 36.49334942879201, .0000008)
    assert res.s12 == approx(0.072, abs=0.5e-3)


def test_inverse_prolate_antipodal():
    prolate = Ellipsoid(6.4e6, -1 / 150)
    res = inverse(prolate, 0.07476, 0, -0.07476, 180)
    assert_result_close(res, {'azi1': 90.00078, 'azi2': 90.00078, 's12': 20106193})

    res = inverse(prolate, 0.1, 0, -0.1, 180)
    assert_result_close(res, {'azi1': 90.00105, 'azi2': 90.00105, 's12': 20106193})


def test_inverse_highly_eccentric():
    # Newton's method alone does not converge here
    ell = Ellipsoid(89.8, -1.83)
    res = inverse(ell, 0, 0, -10, 160)
    assert res.azi1 == approx(120.27, abs=1e-2)
    assert res.azi2 == approx(105.15, abs=1e-2)
    assert res.s12 == approx(266.7, abs=1e-1)


def test_inverse_equatorial():
    res = inverse(WGS84, 0, 0, 0, 179)
    assert_result_close(res, {'azi1': 90, 'azi2': 90, 's12': 19926189})

    # Past the conjugate point the geodesic leaves the equator
    res = inverse(WGS84, 0, 0, 0, 179.5)
    assert_result_close(res, {'azi1': 55.96650, 'azi2': 124.03350, 's12': 19980862})

    res = inverse(WGS84, 0, 0, 0, 180)
    assert_result_close(res, {'azi1': 0, 's12': 20003931})
    assert abs(res.azi2) == approx(180, abs=0.5e-5)

    res = inverse(WGS84, 0, 0, 1, 180)
    assert_result_close(res, {'azi1': 0, 's12': 19893357})
    assert abs(res.azi2) == approx(180, abs=0.5e-5)


def test_inverse_equatorial_sphere_and_prolate():
    sphere = Ellipsoid(6.4e6, 0)
    assert_result_close(inverse(sphere, 0, 0, 0, 179), {'azi1': 90, 'azi2': 90, 's12': 19994492})
    res = inverse(sphere, 0, 0, 0, 180)
    assert_result_close(res, {'azi1': 0, 's12': 20106193})
    assert abs(res.azi2) == approx(180, abs=0.5e-5)
    res = inverse(sphere, 0, 0, 1, 180)
    assert_result_close(res, {'azi1': 0, 's12': 19994492})
    assert abs(res.azi2) == approx(180, abs=0.5e-5)

    prolate = Ellipsoid(6.4e6, -1 / 300)
    assert_result_close(inverse(prolate, 0, 0, 0, 179), {'azi1': 90, 'azi2': 90, 's12': 19994492})
    assert_result_close(inverse(prolate, 0, 0, 0, 180), {'azi1': 90, 'azi2': 90, 's12': 20106193})
    assert_result_close(
        inverse(prolate, 0, 0, 0.5, 180),
        {'azi1': 33.02493, 'azi2': 146.97364, 's12': 20082617}
    )
    res = inverse(prolate, 0, 0, 1, 180)
    assert_result_close(res, {'azi1': 0, 's12': 20027270})
    assert abs(res.azi2) == approx(180, abs=0.5e-5)


def test_inverse_meridian():
    # Quarter meridian
    res = inverse(WGS84, 0, 0, 90, 0)
    assert res.s12 == approx(10001965.7293, abs=1e-3)
    assert res.azi1 == 0.
    assert res.a12 == approx(90, abs=1e-12)

    # Pole to pole
    res = inverse(WGS84, -90, 0, 90, 0)
    assert res.s12 == approx(2 * 10001965.7293, abs=2e-3)


def test_inverse_longitude_normalisation():
    res = inverse(WGS84, 0, 539, 0, 181)
    assert res.lon1 == approx(179, abs=1e-10)
    assert res.lon2 == approx(-179, abs=1e-10)
    assert res.s12 == approx(222639, abs=0.5)


def test_inverse_near_meridian_rounding():
    res = inverse(WGS84, 5, 0.00000000000001, 10, 180)
    assert res.azi1 == approx(0.000000000000035, abs=1.5e-14)
    assert res.azi2 == approx(179.99999999999996, abs=1.5e-14)
    assert res.s12 == approx(18345191.174332713, abs=1e-6)


def test_inverse_coincident():
    res = inverse(WGS84, 10, 20, 10, 20, Capability.ALL)
    assert res.s12 == 0.
    assert res.a12 == 0.
    assert res.m12 == 0.
    assert res.azi1 == res.azi2
    assert res.M12 == approx(1.)
    assert res.S12 == 0.

    res = inverse(WGS84, 90, 0, 90, 0)
    assert res.s12 == 0.


def test_inverse_nan_input():
    res = inverse(WGS84, 0, 0, 1, math.inf)
    assert math.isnan(res.azi1)
    assert math.isnan(res.azi2)
    assert math.isnan(res.s12)

    res = inverse(WGS84, math.nan, 0, 0, 90)
    assert math.isnan(res.azi1)
    assert math.isnan(res.s12)


def test_inverse_latitude_out_of_range():
    res = inverse(WGS84, 91, 0, 0, 0)
    assert math.isnan(res.lat1)
    assert math.isnan(res.s12)

    res = direct(WGS84, -90.5, 0, 45, 1e6)
    assert math.isnan(res.lat2)


def test_inverse_symmetry():
    rng = np.random.default_rng(7)
    for _ in range(25):
        lat1, lat2 = rng.uniform(-90, 90, 2)
        lon1, lon2 = rng.uniform(-180, 180, 2)
        fwd = inverse(WGS84, lat1, lon1, lat2, lon2, Capability.ALL)
        rev = inverse(WGS84, lat2, lon2, lat1, lon1, Capability.ALL)

        assert rev.s12 == approx(fwd.s12, abs=1e-7)
        assert_azimuth_close(rev.azi1, fwd.azi2 + 180, abs_tol=1e-9)
        assert_azimuth_close(rev.azi2, fwd.azi1 + 180, abs_tol=1e-9)
        assert rev.M12 == approx(fwd.M21, abs=1e-12)
        assert rev.S12 == approx(-fwd.S12, abs=1.)


def test_round_trip():
    rng = np.random.default_rng(11)
    for _ in range(25):
        lat1 = rng.uniform(-89, 89)
        lon1 = rng.uniform(-180, 180)
        azi1 = rng.uniform(-180, 180)
        s12 = rng.uniform(1e3, 1.9e7)

        fwd = direct(WGS84, lat1, lon1, azi1, s12)
        back = inverse(WGS84, lat1, lon1, fwd.lat2, fwd.lon2)
        assert back.s12 == approx(s12, abs=1e-6)
        assert_azimuth_close(back.azi1, azi1, abs_tol=1e-8)
        assert_azimuth_close(back.azi2, fwd.azi2, abs_tol=1e-8)


def test_additivity():
    line = make_line(WGS84, 12, -40, 63)
    p2 = line.distance_position(3e6)
    p3 = line.distance_position(7e6)
    seg = inverse(WGS84, p2.lat2, p2.lon2, p3.lat2, p3.lon2)

    assert seg.s12 == approx(p3.s12 - p2.s12, abs=1e-6)
    assert seg.a12 == approx(p3.a12 - p2.a12, abs=1e-10)


def test_sphere_matches_great_circle():
    sphere = Ellipsoid(6_371_000, 0)
    pairs = [
        ((0., 0.), (1., 1.)),
        ((-73.78, 40.64), (103.99, 1.36)),
        ((179., 0.), (-179., 0.)),
        ((10., -60.), (-150., 45.)),
    ]
    for (lon1, lat1), (lon2, lat2) in pairs:
        expected = haversine_distance((lon1, lat1), (lon2, lat2))
        assert inverse(sphere, lat1, lon1, lat2, lon2).s12 == approx(expected, rel=1e-10)


def test_capability_isolation():
    full = inverse(WGS84, 40.64, -73.78, 1.36, 103.99, Capability.ALL)
    dist_only = inverse(WGS84, 40.64, -73.78, 1.36, 103.99, Capability.DISTANCE)

    assert dist_only.s12 == approx(full.s12, abs=1e-9)
    assert dist_only.azi1 is None
    assert dist_only.azi2 is None
    assert dist_only.m12 is None
    assert dist_only.M12 is None
    assert dist_only.M21 is None
    assert dist_only.S12 is None
    assert dist_only.a12 == approx(full.a12, abs=1e-12)

    for field in ('s12', 'azi1', 'azi2', 'm12', 'M12', 'M21', 'S12'):
        assert full[field] is not None

    res = direct(WGS84, 10, 20, 30, 1e6, caps=Capability.LATITUDE)
    assert res.lat2 is not None
    assert res.lon2 is None
    assert res.azi2 is None
    assert res.s12 is None


def test_direct_area():
    ell = Ellipsoid(6.4e6, -1 / 150)
    res = direct(ell, 1, 2, 3, 4, caps=Capability.AREA)
    assert res.S12 == approx(23700, abs=0.5)
    assert res.lat2 is None


def test_inverse_area_sphere():
    sphere = Ellipsoid(6.4e6, 0)
    res = inverse(sphere, 1, 2, 3, 4, Capability.AREA)
    assert res.S12 == approx(49911046115.0, abs=0.5)


def test_direct_arcmode():
    res = direct(WGS84, 0, 0, 0, 90, Flags.ARCMODE, Capability.STANDARD)
    assert res.a12 == 90
    assert res.lat2 == approx(90, abs=1e-12)
    assert res.s12 == approx(10001965.7293, abs=1e-3)

    ell = Ellipsoid(6.4e6, 0.1)
    res = direct(ell, 1, 2, 10, 5e6)
    assert res.a12 == approx(48.55570690, abs=0.5e-8)


def test_direct_long_unroll():
    res = direct(WGS84, 40, -75, -10, 2e7, Flags.LONG_UNROLL)
    assert res.lat2 == approx(-39, abs=1)
    assert res.lon2 == approx(-254, abs=1)
    assert res.azi2 == approx(-170, abs=1)

    res = direct(WGS84, 40, -75, -10, 2e7)
    assert res.lon2 == approx(105, abs=1)

    res = direct(WGS84, 45, 0, -0.000000000000000003, 1e7, Flags.LONG_UNROLL)
    assert res.lat2 == approx(45.30632, abs=0.5e-5)
    assert res.lon2 == approx(-180, abs=0.5e-5)
    assert abs(res.azi2) == approx(180, abs=0.5e-5)


def test_direct_from_pole():
    res = direct(WGS84, 90, 10, 180, -1e6)
    assert res.lat2 == approx(81.04623, abs=0.5e-5)
    assert res.lon2 == approx(-170, abs=0.5e-5)
    assert res.azi2 == approx(0, abs=0.5e-5)


def test_direct_not_shortest():
    res = direct(WGS84, 0, 0, 45, 3e7)
    assert res.a12 > 180
    assert not res.is_shortest


def test_lines():
    line = direct_line(WGS84, 40.64, -73.78, 45.0, 1e7)
    assert line.s13 == 1e7
    assert line.a13 == approx(direct(WGS84, 40.64, -73.78, 45.0, 1e7).a12, abs=1e-12)

    line = direct_line(WGS84, 40.64, -73.78, 45.0, 90, Flags.ARCMODE)
    assert line.a13 == 90
    assert line.s13 == approx(direct(WGS84, 40.64, -73.78, 45.0, 90, Flags.ARCMODE).s12, abs=1e-6)

    inv = inverse(WGS84, 40.64, -73.78, 1.36, 103.99)
    line = inverse_line(WGS84, 40.64, -73.78, 1.36, 103.99)
    assert line.s13 == approx(inv.s12, abs=1e-6)
    assert line.a13 == approx(inv.a12, abs=1e-12)
    assert line.azi1 == approx(inv.azi1, abs=1e-12)

    end = line.distance_position(line.s13)
    assert end.lat2 == approx(1.36, abs=1e-9)
    assert end.lon2 == approx(103.99, abs=1e-9)

    assert isinstance(make_line(WGS84, 0, 0, 0), type(line))
