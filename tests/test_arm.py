import math
import uuid

import pytest

from wombatlib.arm import Arm, ArmConfig, ArmState
from wombatlib.gearbox import Gearbox
from wombatlib.ntutil import get_table
from wombatlib.pid import PIDConfig
from wombatlib.voltage_controller import VoltageController


class RecordingController(VoltageController):
    def __init__(self) -> None:
        self.output = 0.0
        self._inverted = False

    def set_voltage(self, voltage: float) -> None:
        self.output = voltage

    def voltage(self) -> float:
        return self.output

    def set_inverted(self, invert: bool) -> None:
        self._inverted = invert

    def inverted(self) -> bool:
        return self._inverted


def make_arm(position=0.0, arm_mass=2.0, load_mass=1.0, kp=0.0, stable_thresh=-1.0):
    path = f"test/arm/{uuid.uuid4().hex}"
    left, right = RecordingController(), RecordingController()
    config = ArmConfig(
        path=path,
        left_gearbox=Gearbox(left),
        right_gearbox=Gearbox(right),
        arm_encoder=lambda: position,
        pid_config=PIDConfig(f"{path}/gains", kp=kp, stable_thresh=stable_thresh),
        arm_mass=arm_mass,
        load_mass=load_mass,
        arm_length=1.0,
    )
    return Arm(config), left, right


def test_idle_outputs_zero():
    arm, left, right = make_arm()
    arm.on_update(0.02)
    assert (left.output, right.output) == (0.0, 0.0)
    assert arm.state is ArmState.IDLE


def test_raw_scaled_by_default_limit():
    arm, left, right = make_arm()
    arm.set_raw(10.0)
    arm.on_update(0.02)
    assert left.output == pytest.approx(4.0)
    assert right.output == left.output


def test_raw_scaled_by_custom_limit():
    arm, left, _ = make_arm()
    arm.set_speed_limit(0.5)
    arm.set_raw(10.0)
    arm.on_update(0.02)
    assert left.output == pytest.approx(10.0 * 0.5)


def test_set_idle_after_raw():
    arm, left, _ = make_arm()
    arm.set_raw(5.0)
    arm.set_idle()
    arm.on_update(0.02)
    assert left.output == 0.0


def test_angle_from_encoder():
    arm, _, _ = make_arm(position=25.0)
    assert arm.angle() == pytest.approx(math.pi / 2)


def test_vertical_arm_needs_no_feedforward():
    arm, left, _ = make_arm(position=25.0)
    arm.set_angle(arm.angle())
    arm.on_update(0.02)
    assert arm.state is ArmState.ANGLE
    assert left.output == pytest.approx(0.0, abs=1e-9)


def test_feedforward_scales_with_mass():
    light, light_left, _ = make_arm(arm_mass=2.0, load_mass=1.0)
    heavy, heavy_left, _ = make_arm(arm_mass=4.0, load_mass=2.0)
    for arm in (light, heavy):
        arm.set_angle(0.0)
        arm.on_update(0.02)
    assert light_left.output > 0
    assert heavy_left.output == pytest.approx(2 * light_left.output)


def test_proportional_term_pushes_towards_target():
    up, up_left, _ = make_arm(position=25.0, kp=1.0)
    up.set_angle(up.angle() + 0.5)
    up.on_update(0.02)
    down, down_left, _ = make_arm(position=25.0, kp=1.0)
    down.set_angle(down.angle() - 0.5)
    down.on_update(0.02)
    assert up_left.output > 0
    assert down_left.output < 0


def test_publishes_angle_and_config():
    arm, _, _ = make_arm(position=10.0, arm_mass=2.0)
    arm.on_update(0.02)
    table = get_table(arm.config.path)
    assert table.get("angle") == pytest.approx(math.degrees(arm.angle()))
    config_table = table.subtable("config")
    assert config_table.get("armMass") == 2.0
    assert config_table.get("angleOffset") == config_table.get("initialAngle")


def test_max_speed_is_full_voltage_free_speed():
    arm, _, _ = make_arm()
    speed = arm.max_speed()
    assert speed > 0
    assert arm.config.left_gearbox.motor.voltage(0.0, speed) == pytest.approx(12.0)


def test_becomes_stable_when_held_at_setpoint():
    arm, _, _ = make_arm(position=25.0, stable_thresh=0.01)
    assert arm.is_stable() is False
    arm.set_angle(arm.angle())
    for _ in range(25):
        arm.on_update(0.02)
    assert arm.is_stable() is True