"""A two-motor elevator driven to a height or by raw voltage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable

from .behaviour import HasBehaviour
from .gearbox import Gearbox
from .ntutil import NetworkTable, get_table
from .pid import PIDController, PIDConfig

GRAVITY = 9.81
_MAX_VOLTAGE = 12.0
_PID_FEEDFORWARD = 1.2
_PID_VOLTAGE_CAP = 6.0
_METRES_PER_COUNT = 14 / 60 * 2 * 3.1415 * 0.02225


class ElevatorState(Enum):
    IDLE = auto()
    PID = auto()
    MANUAL = auto()
    RAW = auto()


@dataclass
class ElevatorConfig:
    """Elevator hardware and geometry; lengths in m, mass in kg.

    ``elevator_encoder`` returns the raw encoder reading.
    """

    path: str
    left_gearbox: Gearbox
    right_gearbox: Gearbox
    elevator_encoder: Callable[[], float]
    radius: float
    mass: float
    pid: PIDConfig
    top_sensor: Any = None
    bottom_sensor: Any = None
    max_height: float = 1.33
    min_height: float = 0.28
    initial_height: float = 0.0

    def write_nt(self, table: NetworkTable) -> None:
        table.set("radius", self.radius)
        table.set("mass", self.mass)
        table.set("maxHeight", self.max_height)


class Elevator(HasBehaviour):
    """Drives both elevator gearboxes together."""

    def __init__(self, config: ElevatorConfig) -> None:
        self.config = config
        self._state = ElevatorState.IDLE
        self._pid = PIDController(f"{config.path}/pid", config.pid)
        self._table = get_table(config.path)
        self._speed_limit = 0.5
        self._setpoint_manual = 0.0
        self._voltage = 0.0

    @property
    def state(self) -> ElevatorState:
        return self._state

    def on_update(self, dt: float) -> None:
        height = self.encoder_position()
        self._table.set("height", height)

        voltage = 0.0
        if self._state is ElevatorState.MANUAL:
            voltage = self._setpoint_manual
        elif self._state is ElevatorState.PID:
            voltage = min(self._pid.calculate(height, dt, _PID_FEEDFORWARD), _PID_VOLTAGE_CAP)
        elif self._state is ElevatorState.RAW:
            voltage = self._voltage

        voltage *= self._speed_limit
        self.config.left_gearbox.transmission.set_voltage(voltage)
        self.config.right_gearbox.transmission.set_voltage(voltage)

    def set_manual(self, voltage: float) -> None:
        self._state = ElevatorState.MANUAL
        self._setpoint_manual = voltage

    def set_pid(self, height: float) -> None:
        """Drive the elevator to ``height`` metres."""
        self._state = ElevatorState.PID
        self._pid.setpoint = height

    def set_idle(self) -> None:
        self._state = ElevatorState.IDLE

    def set_raw(self, voltage: float) -> None:
        self._state = ElevatorState.RAW
        self._voltage = voltage

    def set_speed_limit(self, limit: float) -> None:
        """Scale every output voltage by ``limit``."""
        self._speed_limit = limit

    def encoder_position(self) -> float:
        """Carriage height in metres, from the encoder."""
        return self.config.elevator_encoder() * _METRES_PER_COUNT

    def height(self) -> float:
        """Carriage height in metres."""
        return self.config.elevator_encoder() * _METRES_PER_COUNT

    def max_speed(self) -> float:
        """Speed in m/s when lifting the load at full voltage."""
        cfg = self.config
        torque = cfg.mass * GRAVITY * cfg.radius
        return cfg.left_gearbox.motor.speed(torque, _MAX_VOLTAGE) * cfg.radius

    def is_stable(self) -> bool:
        return self._pid.is_stable()