import pytest

from wombatlib.control_util import deadzone, spow2


@pytest.mark.parametrize("val", [0.0, 0.01, -0.03, 0.05, -0.05])
def test_deadzone_suppresses_small_inputs(val):
    assert deadzone(val) == 0


@pytest.mark.parametrize("val", [0.06, -0.5, 1.0, -1.0])
def test_deadzone_passes_large_inputs(val):
    assert deadzone(val) == val


def test_deadzone_custom_threshold():
    assert deadzone(0.2, 0.25) == 0
    assert deadzone(0.3, 0.25) == 0.3
    assert deadzone(-0.3, 0.25) == -0.3


def test_spow2_squares_positive():
    assert spow2(0.5) == pytest.approx(0.25)


def test_spow2_is_odd():
    for val in (0.1, 0.5, 0.9, 2.0):
        assert spow2(-val) == pytest.approx(-spow2(val))


def test_spow2_is_monotonic():
    values = [-1.0, -0.5, -0.1, 0.1, 0.5, 1.0]
    results = [spow2(v) for v in values]
    assert results == sorted(results)