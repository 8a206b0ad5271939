import dataclasses

import pytest

from geodist import GeodesicResult


def test_getitem():
    res = GeodesicResult(a12=10., lat1=1., s12=1000.)
    assert res['a12'] == 10.
    assert res['s12'] == 1000.
    assert res.s12 == 1000.

    with pytest.raises(KeyError):
        _ = res['m12']

    with pytest.raises(KeyError):
        _ = res['not_a_field']


def test_to_dict():
    res = GeodesicResult(a12=10., lat1=1., lon1=0., s12=1000.)
    assert res.to_dict() == {'a12': 10., 'lat1': 1., 'lon1': 0., 's12': 1000.}


def test_is_shortest():
    assert GeodesicResult(a12=179.).is_shortest
    assert GeodesicResult(a12=-180.).is_shortest
    assert not GeodesicResult(a12=181.).is_shortest


def test_frozen():
    res = GeodesicResult(a12=10.)
    with pytest.raises(dataclasses.FrozenInstanceError):
        res.a12 = 5.
