"""Kinematics and a physics model for a two-mecanum, one-omni drive base."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .drivetrain import ChassisSpeeds
from .gearbox import DCMotor

Vector = tuple[float, float]

MECANUM_FL_BASIS: Vector = (0.707, -0.707)
MECANUM_FR_BASIS: Vector = (0.707, 0.707)
OMNI_REAR_BASIS: Vector = (0.0, -1.0)


@dataclass(frozen=True)
class WaspWheelSpeeds:
    """Wheel surface speeds in m/s."""

    left: float
    right: float
    rear: float


class WaspDriveKinematics:
    """Maps chassis speeds to the three wheel speeds."""

    def __init__(self, track_width: float, track_length: float) -> None:
        turn = track_width / 2 + track_length / 2
        self._inverse = (
            (1.0, -1.0, -turn),
            (1.0, 1.0, turn),
            (0.0, -1.0, track_length / 2),
        )

    def to_wheel_speeds(self, chassis: ChassisSpeeds) -> WaspWheelSpeeds:
        state = (chassis.vx, chassis.vy, chassis.omega)
        left, right, rear = (sum(a * b for a, b in zip(row, state)) for row in self._inverse)
        return WaspWheelSpeeds(left, right, rear)


class HolonomicWheelSim:
    """A driven wheel pushing along a fixed direction in the robot frame."""

    def __init__(self, motor: DCMotor, radius: float, mass: float, force_basis: Vector) -> None:
        self._motor = motor
        self._radius = radius
        self._mass = mass
        norm = math.hypot(*force_basis)
        self._basis = (force_basis[0] / norm, force_basis[1] / norm)
        self.speed = 0.0

    @property
    def basis(self) -> Vector:
        return self._basis

    def update(self, voltage: float, dt: float) -> Vector:
        """Advance by ``dt`` seconds at ``voltage``; return the force (N) on the chassis."""
        motor = self._motor
        torque = motor.torque(motor.current(self.speed / self._radius, voltage))
        magnitude = torque / self._radius
        force = (magnitude * self._basis[0], magnitude * self._basis[1])
        self.speed += torque / (self._mass * self._radius) * dt
        return force


class WASPSim:
    """Integrates chassis motion from the three wheel voltages."""

    def __init__(
        self,
        mecanum_motor: DCMotor,
        mecanum_radius: float,
        track_width: float,
        omni_motor: DCMotor,
        omni_radius: float,
        track_length: float,
        j: float,
        mass: float,
    ) -> None:
        self.left_mecanum = HolonomicWheelSim(mecanum_motor, mecanum_radius, mass / 3, MECANUM_FL_BASIS)
        self.right_mecanum = HolonomicWheelSim(mecanum_motor, mecanum_radius, mass / 3, MECANUM_FR_BASIS)
        self.rear_omni = HolonomicWheelSim(omni_motor, omni_radius, mass / 3, OMNI_REAR_BASIS)
        self._j = j
        self._mass = mass
        self._track_width = track_width
        self._track_length = track_length
        self.omega = 0.0
        self.theta = 0.0
        self.vx = 0.0
        self.vy = 0.0
        self.x = 0.0
        self.y = 0.0

    def update(self, left_voltage: float, right_voltage: float, rear_voltage: float, dt: float) -> None:
        left = self.left_mecanum.update(left_voltage, dt)
        right = self.right_mecanum.update(right_voltage, dt)
        rear = self.rear_omni.update(rear_voltage, dt)

        net_x = left[0] + right[0] + rear[0]
        net_y = left[1] + right[1] + rear[1]

        torque = (
            left[0] * -self._track_width / 2
            + right[0] * self._track_width / 2
            + rear[1] * -self._track_length
        )
        self.omega += torque / self._j * dt
        self.theta += self.omega * dt

        self.vx += net_x / self._mass * dt
        self.vy += net_y / self._mass * dt
        self.x += self.vx * dt
        self.y += self.vy * dt