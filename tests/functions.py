from pytest import approx

from geodist import GeodesicResult


def assert_result_close(result: GeodesicResult, expected: dict, abs_tol=0.5e-5, dist_tol=0.5):
    """
    Asserts that each expected field of a result matches within tolerance.

    Args:
        result: The GeodesicResult under test
        expected: Mapping of field name to expected value
        abs_tol: Tolerance for angles (degrees). Default 0.5e-5.
        dist_tol: Tolerance for lengths (meters). Default 0.5.
    """
    try:
        for key, value in expected.items():
            tol = dist_tol if key in ('s12', 'm12', 'S12') else abs_tol
            assert result[key] == approx(value, abs=tol), key
    except AssertionError as e:
        print(result)
        raise e


def assert_azimuth_close(actual: float, expected: float, abs_tol=0.5e-5):
    """Compare azimuths modulo 360 (so that 180 and -180 are equal)"""
    diff = (actual - expected + 180) % 360 - 180
    assert diff == approx(0, abs=abs_tol)
