import math

import pytest

from wombatlib.gyro import Gyro, NavX


def test_starts_at_zero():
    assert NavX().angle() == 0.0


def test_set_angle_stores_degrees():
    navx = NavX()
    navx.set_angle(1.25)
    assert navx.angle() == pytest.approx(math.degrees(1.25))


def test_reset_clears_angle():
    navx = NavX()
    navx.set_angle(0.7)
    navx.reset()
    assert navx.angle() == 0.0


def test_calibrate_keeps_angle():
    navx = NavX()
    navx.set_angle(0.3)
    navx.calibrate()
    assert navx.angle() == pytest.approx(math.degrees(0.3))


def test_rate_pitch_roll_are_zero():
    navx = NavX()
    assert (navx.rate(), navx.pitch(), navx.roll()) == (0.0, 0.0, 0.0)


def test_rotation_is_counter_clockwise_radians():
    navx = NavX()
    navx.set_angle(0.4)
    assert navx.rotation() == pytest.approx(-0.4)


def test_sim_gyro_drives_navx():
    navx = NavX()
    sim = navx.make_sim_gyro()
    sim.set_angle(-2.0)
    assert navx.angle() == pytest.approx(math.degrees(-2.0))


def test_gyro_is_abstract():
    with pytest.raises(TypeError):
        Gyro()