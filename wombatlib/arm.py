"""A two-motor arm held at an angle against gravity."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from .behaviour import HasBehaviour
from .gearbox import Gearbox
from .ntutil import NetworkTable, get_table
from .pid import PIDController, PIDConfig

GRAVITY = 9.81
_MAX_VOLTAGE = 12.0


@dataclass
class ArmConfig:
    """Arm hardware and geometry; angles in radians, masses in kg, lengths in m.

    ``arm_encoder`` returns the encoder reading, where 100 counts make one turn
    of the arm.
    """

    path: str
    left_gearbox: Gearbox
    right_gearbox: Gearbox
    arm_encoder: Callable[[], float]
    pid_config: PIDConfig
    arm_mass: float
    load_mass: float
    arm_length: float
    min_angle: float = math.radians(-90)
    max_angle: float = math.radians(270)
    initial_angle: float = math.radians(90)
    angle_offset: float = 0.0

    def write_nt(self, table: NetworkTable) -> None:
        table.set("armMass", self.arm_mass)
        table.set("loadMass", self.load_mass)
        table.set("armLength", self.arm_length)
        table.set("minAngle", math.degrees(self.min_angle))
        table.set("maxAngle", math.degrees(self.max_angle))
        table.set("initialAngle", math.degrees(self.initial_angle))
        table.set("angleOffset", math.degrees(self.initial_angle))


class ArmState(Enum):
    IDLE = auto()
    ANGLE = auto()
    RAW = auto()


class Arm(HasBehaviour):
    """Drives both arm gearboxes together, either raw or to a target angle."""

    def __init__(self, config: ArmConfig) -> None:
        self.config = config
        self._state = ArmState.IDLE
        self._pid = PIDController(f"{config.path}/pid", config.pid_config)
        self._table = get_table(config.path)
        self._speed_limit = 0.4
        self._voltage = 0.0

    @property
    def state(self) -> ArmState:
        return self._state

    def on_update(self, dt: float) -> None:
        cfg = self.config
        voltage = 0.0
        angle = self.angle()

        if self._state is ArmState.ANGLE:
            torque = (
                GRAVITY
                * cfg.arm_length
                * math.cos(angle + cfg.angle_offset)
                * (0.5 * cfg.arm_mass + cfg.load_mass)
            )
            feedforward = cfg.left_gearbox.motor.voltage(torque, 0.0)
            voltage = self._pid.calculate(angle, dt, feedforward)
        elif self._state is ArmState.RAW:
            voltage = self._voltage

        voltage *= self._speed_limit

        cfg.left_gearbox.transmission.set_voltage(voltage)
        cfg.right_gearbox.transmission.set_voltage(voltage)

        self._table.set("angle", math.degrees(angle))
        cfg.write_nt(self._table.subtable("config"))

    def set_idle(self) -> None:
        self._state = ArmState.IDLE

    def set_angle(self, angle: float) -> None:
        """Hold the arm at ``angle`` radians."""
        self._state = ArmState.ANGLE
        self._pid.setpoint = angle

    def set_raw(self, voltage: float) -> None:
        self._state = ArmState.RAW
        self._voltage = voltage

    def set_speed_limit(self, limit: float) -> None:
        """Scale every output voltage by ``limit``."""
        self._speed_limit = limit

    def angle(self) -> float:
        """Arm angle in radians."""
        return math.radians(self.config.arm_encoder() / 100 * 360)

    def max_speed(self) -> float:
        """Unloaded motor speed at full voltage, in rad/s."""
        return self.config.left_gearbox.motor.speed(0.0, _MAX_VOLTAGE)

    def is_stable(self) -> bool:
        return self._pid.is_stable()