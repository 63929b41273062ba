import math
import uuid

import pytest

from wombatlib.drivetrain import (
    ChassisSpeeds,
    DifferentialDriveKinematics,
    DifferentialWheelSpeeds,
    Drivetrain,
    DrivetrainConfig,
    DrivetrainDriveDistance,
    DrivetrainState,
    DrivetrainTurnToAngle,
)
from wombatlib.encoder import SimulatedEncoder
from wombatlib.gearbox import DCMotor, Gearbox
from wombatlib.gyro import NavX
from wombatlib.pid import PIDConfig
from wombatlib.voltage_controller import VoltageController


class RecordingController(VoltageController):
    def __init__(self):
        self.volts = None
        self._inverted = False

    def set_voltage(self, voltage):
        self.volts = voltage

    def voltage(self):
        return self.volts or 0.0

    def set_inverted(self, invert):
        self._inverted = invert

    def inverted(self):
        return self._inverted


def make_drivetrain(current_limit=300.0, stable_thresh=-1.0, radius=0.1):
    path = f"test/drivetrain/{uuid.uuid4().hex}"
    left = Gearbox(RecordingController(), SimulatedEncoder(1.0), DCMotor.cim(2))
    right = Gearbox(RecordingController(), SimulatedEncoder(1.0), DCMotor.cim(2))
    config = DrivetrainConfig(
        left_drive=left,
        right_drive=right,
        gyro=NavX(),
        wheel_radius=radius,
        track_width=0.5,
        current_limit=current_limit,
        velocity_pid=PIDConfig(f"{path}/vel"),
        distance_pid=PIDConfig(f"{path}/dist", stable_thresh=stable_thresh),
        angle_pid=PIDConfig(f"{path}/ang", stable_thresh=stable_thresh),
    )
    return Drivetrain(path, config)


def outputs(drivetrain):
    cfg = drivetrain.config
    return cfg.left_drive.transmission.volts, cfg.right_drive.transmission.volts


def test_kinematics_straight_line():
    speeds = DifferentialDriveKinematics(0.5).to_wheel_speeds(ChassisSpeeds(1.0, 0.0, 0.0))
    assert speeds.left == pytest.approx(1.0)
    assert speeds.right == pytest.approx(1.0)


@pytest.mark.parametrize("vx,omega", [(0.0, 2.0), (1.5, -0.7), (-2.0, 3.0)])
def test_kinematics_invariants(vx, omega):
    track = 0.6
    speeds = DifferentialDriveKinematics(track).to_wheel_speeds(ChassisSpeeds(vx, 0.0, omega))
    assert (speeds.left + speeds.right) / 2 == pytest.approx(vx)
    assert (speeds.right - speeds.left) / track == pytest.approx(omega)


def test_desaturate_keeps_ratio():
    speeds = DifferentialWheelSpeeds(4.0, -2.0)
    speeds.desaturate(1.0)
    assert max(abs(speeds.left), abs(speeds.right)) == pytest.approx(1.0)
    assert speeds.left / speeds.right == pytest.approx(-2.0)


def test_desaturate_leaves_slow_speeds():
    speeds = DifferentialWheelSpeeds(0.3, -0.2)
    speeds.desaturate(1.0)
    assert (speeds.left, speeds.right) == (0.3, -0.2)


def test_idle_outputs_zero():
    drivetrain = make_drivetrain()
    drivetrain.on_update(0.02)
    assert outputs(drivetrain) == (0.0, 0.0)


def test_raw_voltage_passes_within_limit():
    drivetrain = make_drivetrain()
    drivetrain.set_raw_voltage(1.0, -1.0)
    drivetrain.on_update(0.02)
    assert drivetrain.state is DrivetrainState.RAW
    assert outputs(drivetrain) == (pytest.approx(1.0), pytest.approx(-1.0))


def test_raw_voltage_scaled_to_current_limit():
    drivetrain = make_drivetrain(current_limit=40.0)
    drivetrain.set_raw_voltage(12.0, 6.0)
    drivetrain.on_update(0.02)
    left, right = outputs(drivetrain)
    motor = drivetrain.config.left_drive.motor
    assert left / right == pytest.approx(2.0)
    assert motor.current(0.0, left) == pytest.approx(40.0)


def test_manual_scales_power_by_full_voltage():
    drivetrain = make_drivetrain()
    drivetrain.set_manual(0.5, -0.25)
    drivetrain.on_update(0.02)
    assert drivetrain.state is DrivetrainState.MANUAL
    assert outputs(drivetrain) == (pytest.approx(6.0), pytest.approx(-3.0))


def test_velocity_drives_both_sides_forward_equally():
    drivetrain = make_drivetrain()
    drivetrain.set_velocity(ChassisSpeeds(1.0, 0.0, 0.0))
    drivetrain.on_update(0.02)
    left, right = outputs(drivetrain)
    motor = drivetrain.config.left_drive.motor
    assert left == pytest.approx(right)
    assert left == pytest.approx(motor.voltage(0.0, 1.0 / 0.1))


def test_target_pose_drives_nothing():
    drivetrain = make_drivetrain()
    drivetrain.set_target_pose((1.0, 2.0, 0.0))
    drivetrain.on_update(0.02)
    assert drivetrain.target_pose == (1.0, 2.0, 0.0)
    assert outputs(drivetrain) == (0.0, 0.0)


def test_distances_and_speeds_from_encoders():
    drivetrain = make_drivetrain(radius=0.1)
    drivetrain.config.left_drive.encoder.sim_ticks = 1.0
    drivetrain.config.right_drive.encoder.sim_velocity = 2.0
    assert drivetrain.left_distance() == pytest.approx(math.tau * 0.1)
    assert drivetrain.right_distance() == pytest.approx(0.0)
    assert drivetrain.right_speed() == pytest.approx(2.0 * math.tau * 0.1)
    assert drivetrain.left_speed() == pytest.approx(0.0)


def test_drive_distance_averages_sides():
    drivetrain = make_drivetrain(radius=1.0)
    drivetrain.config.left_drive.encoder.sim_ticks = 1.0
    drivetrain.config.right_drive.encoder.sim_ticks = 3.0
    behaviour = DrivetrainDriveDistance(drivetrain, 2.0)
    assert drivetrain in behaviour.controlled
    assert behaviour.distance() == pytest.approx(2.0 * math.tau)


def test_drive_distance_sets_velocity_then_finishes():
    drivetrain = make_drivetrain(stable_thresh=1e9)
    behaviour = DrivetrainDriveDistance(drivetrain, 1.0)
    behaviour.on_start()
    behaviour.on_tick(0.02)
    assert drivetrain.state is DrivetrainState.VELOCITY
    for _ in range(25):
        behaviour.on_tick(0.02)
    assert behaviour.is_finished()
    assert drivetrain.state is DrivetrainState.IDLE


def test_turn_to_angle_reads_gyro_counter_clockwise():
    drivetrain = make_drivetrain()
    drivetrain.config.gyro.set_angle(math.radians(30.0))
    behaviour = DrivetrainTurnToAngle(drivetrain, 90.0)
    assert behaviour.angle() == pytest.approx(-30.0)


def test_turn_to_angle_finishes_when_stable():
    drivetrain = make_drivetrain(stable_thresh=1e9)
    behaviour = DrivetrainTurnToAngle(drivetrain, 0.0)
    behaviour.on_start()
    behaviour.on_tick(0.02)
    assert drivetrain.state is DrivetrainState.VELOCITY
    assert not behaviour.is_finished()
    for _ in range(25):
        behaviour.on_tick(0.02)
    assert behaviour.is_finished()
    assert drivetrain.state is DrivetrainState.IDLE