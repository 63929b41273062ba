"""DC motor model and the pairing of a motor output with its encoder."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .encoder import Encoder
from .voltage_controller import VoltageController


class DCMotor:
    """A brushed DC motor model; several identical motors may share a shaft.

    Torques in N·m, currents in A, speeds in rad/s, voltages in V.
    """

    def __init__(
        self,
        nominal_voltage: float,
        stall_torque: float,
        stall_current: float,
        free_current: float,
        free_speed: float,
        num_motors: int = 1,
    ) -> None:
        self.nominal_voltage = nominal_voltage
        self.stall_torque = stall_torque * num_motors
        self.stall_current = stall_current * num_motors
        self.free_current = free_current * num_motors
        self.free_speed = free_speed
        self.num_motors = num_motors
        self.r = nominal_voltage / self.stall_current
        self.kv = free_speed / (nominal_voltage - self.r * self.free_current)
        self.kt = self.stall_torque / self.stall_current

    @classmethod
    def cim(cls, count: int = 1) -> DCMotor:
        return cls(12.0, 2.42, 133.0, 2.7, 5310.0 * math.tau / 60.0, count)

    def voltage(self, torque: float, speed: float) -> float:
        """Voltage needed to produce ``torque`` while turning at ``speed``."""
        return speed / self.kv + torque / self.kt * self.r

    def speed(self, torque: float, voltage: float) -> float:
        """Speed reached under ``torque`` with ``voltage`` applied."""
        return voltage * self.kv - torque / self.kt * self.r * self.kv

    def current(self, speed: float, voltage: float) -> float:
        """Current drawn at ``speed`` with ``voltage`` applied."""
        return -speed / self.kv / self.r + voltage / self.r

    def torque(self, current: float) -> float:
        """Torque produced by ``current``."""
        return current * self.kt

    def __repr__(self) -> str:
        return (
            f"DCMotor(nominal_voltage={self.nominal_voltage}, stall_torque={self.stall_torque}, "
            f"stall_current={self.stall_current}, free_current={self.free_current}, "
            f"free_speed={self.free_speed}, num_motors={self.num_motors})"
        )


@dataclass
class Gearbox:
    """A motor output, its optional encoder, and the motor model behind it."""

    transmission: VoltageController
    encoder: Encoder | None = None
    motor: DCMotor = field(default_factory=lambda: DCMotor.cim(2))