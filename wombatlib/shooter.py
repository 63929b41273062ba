"""A flywheel shooter held at a speed, with behaviours that drive it."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto

from .behaviour import Behaviour, HasBehaviour
from .gearbox import Gearbox
from .ntutil import get_table
from .pid import PIDConfig, PIDController

_RAD_PER_S_TO_RPM = 60.0 / math.tau


class ShooterState(Enum):
    PID = auto()
    MANUAL = auto()
    IDLE = auto()


@dataclass
class ShooterParams:
    """Shooter hardware: the gearbox (with encoder), speed gains and current limit in A."""

    gearbox: Gearbox
    pid: PIDConfig
    current_limit: float


class Shooter(HasBehaviour):
    """Drives a flywheel by voltage or to a speed in rad/s, within a current limit."""

    def __init__(self, path: str, params: ShooterParams) -> None:
        self.params = params
        self._state = ShooterState.IDLE
        self._setpoint_manual = 0.0
        self._pid = PIDController(f"{path}/pid", params.pid)
        self._table = get_table("shooter")

    @property
    def state(self) -> ShooterState:
        return self._state

    def set_manual(self, voltage: float) -> None:
        self._state = ShooterState.MANUAL
        self._setpoint_manual = voltage

    def set_pid(self, goal: float) -> None:
        """Spin the flywheel up to ``goal`` rad/s."""
        self._state = ShooterState.PID
        self._pid.setpoint = goal

    def set_idle(self) -> None:
        self._state = ShooterState.IDLE

    def on_update(self, dt: float) -> None:
        gearbox = self.params.gearbox
        motor = gearbox.motor
        current_speed = gearbox.encoder.angular_velocity()

        voltage = 0.0
        if self._state is ShooterState.MANUAL:
            voltage = self._setpoint_manual
        elif self._state is ShooterState.PID:
            feedforward = motor.voltage(0.0, self._pid.setpoint)
            voltage = self._pid.calculate(current_speed, dt, feedforward)

        max_torque = motor.torque(self.params.current_limit)
        max_voltage = motor.voltage(max_torque, current_speed)
        voltage = min(voltage, max_voltage)

        gearbox.transmission.set_voltage(voltage)

        self._table.set("output_volts", voltage)
        self._table.set("speed_rpm", current_speed * _RAD_PER_S_TO_RPM)
        self._table.set("setpoint_rpm", self._pid.setpoint * _RAD_PER_S_TO_RPM)
        self._table.set("stable", self._pid.is_stable())

    def is_stable(self) -> bool:
        return self._pid.is_stable()


class ShooterConstant(Behaviour):
    """Holds the shooter at a fixed voltage."""

    def __init__(self, shooter: Shooter, setpoint: float) -> None:
        super().__init__()
        self._shooter = shooter
        self._setpoint = setpoint
        self.controls(shooter)

    def on_tick(self, dt: float) -> None:
        self._shooter.set_manual(self._setpoint)


class ShooterSpinup(Behaviour):
    """Spins the shooter up to a speed; finishes once stable unless told to hold."""

    def __init__(self, shooter: Shooter, speed: float, hold: bool = False) -> None:
        super().__init__()
        self._shooter = shooter
        self._speed = speed
        self._hold = hold
        self.controls(shooter)

    def on_tick(self, dt: float) -> None:
        self._shooter.set_pid(self._speed)
        if not self._hold and self._shooter.is_stable():
            self.set_done()