"""A differential (tank) drivetrain and behaviours that drive it."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .behaviour import Behaviour, HasBehaviour
from .gearbox import Gearbox
from .gyro import Gyro
from .pid import PIDConfig, PIDController

_FULL_POWER_VOLTAGE = 12.0


@dataclass
class ChassisSpeeds:
    """Robot-relative velocity: ``vx`` and ``vy`` in m/s, ``omega`` in rad/s CCW."""

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0


@dataclass
class DifferentialWheelSpeeds:
    """Left and right wheel speeds in m/s."""

    left: float = 0.0
    right: float = 0.0

    def desaturate(self, max_speed: float) -> None:
        """Scale both speeds down, keeping their ratio, so neither exceeds ``max_speed``."""
        real_max = max(abs(self.left), abs(self.right))
        if real_max > max_speed:
            self.left = self.left / real_max * max_speed
            self.right = self.right / real_max * max_speed


class DifferentialDriveKinematics:
    """Converts chassis speeds to wheel speeds for a given track width in m."""

    def __init__(self, track_width: float) -> None:
        self.track_width = track_width

    def to_wheel_speeds(self, chassis: ChassisSpeeds) -> DifferentialWheelSpeeds:
        half = self.track_width / 2.0
        return DifferentialWheelSpeeds(
            left=chassis.vx - half * chassis.omega,
            right=chassis.vx + half * chassis.omega,
        )


class DrivetrainState(Enum):
    MANUAL = auto()
    IDLE = auto()
    RAW = auto()
    VELOCITY = auto()
    POSE = auto()


@dataclass
class DrivetrainConfig:
    """Drivetrain hardware; lengths in m, current limit in A.

    ``angle_pid`` works in degrees and outputs degrees per second.
    """

    left_drive: Gearbox
    right_drive: Gearbox
    gyro: Gyro | None
    wheel_radius: float
    track_width: float
    current_limit: float
    velocity_pid: PIDConfig
    distance_pid: PIDConfig
    angle_pid: PIDConfig


class Drivetrain(HasBehaviour):
    """A tank drive commanded by voltage, power or chassis velocity."""

    def __init__(self, path: str, config: DrivetrainConfig) -> None:
        self.config = config
        self._state = DrivetrainState.IDLE
        self._left_raw = 0.0
        self._right_raw = 0.0
        self._left_manual = 0.0
        self._right_manual = 0.0
        self._speed = ChassisSpeeds()
        self._target_pose: Any = None
        self._kinematics = DifferentialDriveKinematics(config.track_width)
        self._left_velocity = PIDController(f"{path}/pid/left", config.velocity_pid)
        self._right_velocity = PIDController(f"{path}/pid/right", config.velocity_pid)

    @property
    def state(self) -> DrivetrainState:
        return self._state

    @property
    def target_pose(self) -> Any:
        return self._target_pose

    def on_update(self, dt: float) -> None:
        cfg = self.config
        left_voltage = right_voltage = 0.0

        wheel_speeds = self._kinematics.to_wheel_speeds(self._speed)
        wheel_speeds.desaturate(cfg.left_drive.motor.free_speed * cfg.wheel_radius)

        if self._state is DrivetrainState.MANUAL:
            left_voltage, right_voltage = self._left_manual, self._right_manual
        elif self._state is DrivetrainState.RAW:
            left_voltage, right_voltage = self._left_raw, self._right_raw
        elif self._state is DrivetrainState.VELOCITY:
            self._left_velocity.setpoint = wheel_speeds.left
            self._right_velocity.setpoint = wheel_speeds.right
            ff_left = cfg.left_drive.motor.voltage(0.0, self._left_velocity.setpoint / cfg.wheel_radius)
            ff_right = cfg.right_drive.motor.voltage(0.0, self._right_velocity.setpoint / cfg.wheel_radius)
            left_voltage = self._left_velocity.calculate(self.left_speed(), dt, ff_left)
            right_voltage = self._right_velocity.calculate(self.right_speed(), dt, ff_right)

        motor = cfg.left_drive.motor
        torque_limit = motor.torque(cfg.current_limit)
        fastest = max(
            abs(cfg.left_drive.encoder.angular_velocity()),
            abs(cfg.right_drive.encoder.angular_velocity()),
        )
        max_volt = motor.voltage(torque_limit, fastest)

        real_max = max(abs(left_voltage), abs(right_voltage))
        if real_max > max_volt:
            right_voltage = right_voltage / real_max * max_volt
            left_voltage = left_voltage / real_max * max_volt

        cfg.left_drive.transmission.set_voltage(left_voltage)
        cfg.right_drive.transmission.set_voltage(right_voltage)

    def set_raw_voltage(self, left: float, right: float) -> None:
        self._state = DrivetrainState.RAW
        self._left_raw = left
        self._right_raw = right

    def set_manual(self, left_power: float, right_power: float) -> None:
        """Drive each side at a fraction of full power, from -1 to 1."""
        self._state = DrivetrainState.MANUAL
        self._left_raw = self._left_manual = left_power * _FULL_POWER_VOLTAGE
        self._right_raw = self._right_manual = right_power * _FULL_POWER_VOLTAGE

    def set_idle(self) -> None:
        self._state = DrivetrainState.IDLE

    def set_velocity(self, speeds: ChassisSpeeds) -> None:
        self._state = DrivetrainState.VELOCITY
        self._speed = speeds

    def set_target_pose(self, pose: Any) -> None:
        """Record a target pose; this state drives no output."""
        self._state = DrivetrainState.POSE
        self._target_pose = pose

    def left_distance(self) -> float:
        return self.config.left_drive.encoder.position() * self.config.wheel_radius

    def right_distance(self) -> float:
        return self.config.right_drive.encoder.position() * self.config.wheel_radius

    def left_speed(self) -> float:
        return self.config.left_drive.encoder.angular_velocity() * self.config.wheel_radius

    def right_speed(self) -> float:
        return self.config.right_drive.encoder.angular_velocity() * self.config.wheel_radius


def _heading_degrees(drivetrain: Drivetrain) -> float:
    return math.degrees(drivetrain.config.gyro.rotation())


class DrivetrainDriveDistance(Behaviour):
    """Drives straight for ``length`` metres, holding the starting heading."""

    def __init__(self, drivetrain: Drivetrain, length: float) -> None:
        super().__init__()
        self._drivetrain = drivetrain
        cfg = drivetrain.config
        self._distance_pid = PIDController(
            "drivetrain/behaviours/DrivetrainDriveDistance/pid/distance", cfg.distance_pid
        )
        self._angle_pid = PIDController(
            "drivetrain/behaviours/DrivetrainDriveDistance/pid/angle", cfg.angle_pid
        )
        self._start_distance = 0.0
        self._start_angle = 0.0
        self.controls(drivetrain)
        self._distance_pid.setpoint = length
        self._angle_pid.setpoint = 0.0
        self._angle_pid.wrap = 360.0

    def distance(self) -> float:
        """Mean distance of the two sides, in m."""
        return (self._drivetrain.left_distance() + self._drivetrain.right_distance()) / 2

    def angle(self) -> float:
        """Heading in degrees, counter-clockwise positive."""
        return _heading_degrees(self._drivetrain)

    def on_start(self) -> None:
        self._start_distance = self.distance()
        self._start_angle = self.angle()

    def on_tick(self, dt: float) -> None:
        fwd_speed = self._distance_pid.calculate(self.distance() - self._start_distance, dt)
        self._angle_pid.setpoint = 0.0
        ang_speed = self._angle_pid.calculate(self.angle() - self._start_angle, dt)

        self._drivetrain.set_velocity(ChassisSpeeds(fwd_speed, 0.0, math.radians(ang_speed)))

        if self._distance_pid.is_stable() and self._angle_pid.is_stable():
            self._drivetrain.set_idle()
            self.set_done()


class DrivetrainTurnToAngle(Behaviour):
    """Turns on the spot by ``setpoint`` degrees from the starting heading."""

    def __init__(self, drivetrain: Drivetrain, setpoint: float) -> None:
        super().__init__()
        self._drivetrain = drivetrain
        self._pid = PIDController(
            "drivetrain/behaviours/DrivetrainTurnAngle/pid", drivetrain.config.angle_pid
        )
        self._start_angle = 0.0
        self.controls(drivetrain)
        self._pid.wrap = 360.0
        self._pid.setpoint = setpoint

    def angle(self) -> float:
        """Heading in degrees, counter-clockwise positive."""
        return _heading_degrees(self._drivetrain)

    def on_start(self) -> None:
        self._start_angle = self.angle()

    def on_tick(self, dt: float) -> None:
        speed = self._pid.calculate(self.angle() - self._start_angle, dt)
        self._drivetrain.set_velocity(ChassisSpeeds(0.0, 0.0, math.radians(speed)))

        if self._pid.is_stable():
            self._drivetrain.set_idle()
            self.set_done()