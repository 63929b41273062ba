"""PID gains bound to network tables and a PID controller using them."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from functools import partial

from .ntutil import NTBound, get_table

_FILTER_TAPS = 20
_STABLE_ITERATIONS = 20


@dataclass
class PIDConfig:
    """PID gains and stability thresholds, published under ``path``.

    Changes made to the published entries are written back to the fields.
    A negative threshold disables the corresponding check or zone.
    """

    path: str
    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    stable_thresh: float = -1.0
    stable_deriv_thresh: float = -1.0
    izone: float = -1.0
    _bindings: list[NTBound] = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.register_nt()

    def _assign(self, attr: str, value: float) -> None:
        setattr(self, attr, float(value))

    def register_nt(self) -> None:
        table = get_table(self.path)
        for key, attr in (
            ("kP", "kp"),
            ("kI", "ki"),
            ("kD", "kd"),
            ("stableThresh", "stable_thresh"),
            ("stableThreshVelocity", "stable_deriv_thresh"),
            ("izone", "izone"),
        ):
            self._bindings.append(NTBound(table, key, getattr(self, attr), partial(self._assign, attr)))


class _MovingAverage:
    def __init__(self, taps: int) -> None:
        self._taps = taps
        self._window = deque([0.0] * taps, maxlen=taps)

    def __call__(self, value: float) -> float:
        self._window.append(value)
        return sum(self._window) / self._taps


class PIDController:
    """A PID loop with optional wrapping, integral zone and stability detection."""

    def __init__(self, path: str, config: PIDConfig, setpoint: float = 0.0) -> None:
        self.config = config
        self._setpoint = setpoint
        self._integral_sum = 0.0
        self._last_pv = 0.0
        self._last_error = 0.0
        self._iterations = 0
        self.wrap: float | None = None
        self._pos_filter = _MovingAverage(_FILTER_TAPS)
        self._vel_filter = _MovingAverage(_FILTER_TAPS)
        self._stable_pos = 0.0
        self._stable_vel = 0.0
        self._table = get_table(path)

    @property
    def setpoint(self) -> float:
        return self._setpoint

    @setpoint.setter
    def setpoint(self, value: float) -> None:
        if abs(value - self._setpoint) > 0.05 * self._setpoint:
            self._iterations = 0
        self._setpoint = value

    @property
    def error(self) -> float:
        """The error seen by the most recent calculation."""
        return self._last_error

    def reset(self) -> None:
        self._integral_sum = 0.0

    def _wrapped(self, value: float) -> float:
        if self.wrap is None:
            return value
        wr = self.wrap
        value = math.fmod(value, wr)
        if abs(value) > wr / 2.0:
            return value - wr if value > 0 else value + wr
        return value

    def calculate(self, pv: float, dt: float, feedforward: float = 0.0) -> float:
        cfg = self.config
        error = self._wrapped(self._setpoint - pv)
        self._integral_sum += error * dt
        if cfg.izone > 0 and (error > cfg.izone or error < -cfg.izone):
            self._integral_sum = 0.0

        deriv = (pv - self._last_pv) / dt if self._iterations > 0 else 0.0

        self._stable_pos = self._pos_filter(error)
        self._stable_vel = self._vel_filter(deriv)

        out = cfg.kp * error + cfg.ki * self._integral_sum + cfg.kd * deriv + feedforward

        table = self._table
        table.set("pv", pv)
        table.set("dt", dt)
        table.set("setpoint", self._setpoint)
        table.set("error", error)
        table.set("integralSum", self._integral_sum)
        table.set("stable", self.is_stable())
        table.set("demand", out)

        self._last_pv = pv
        self._last_error = error
        self._iterations += 1
        return out

    def is_stable(self, stable_thresh: float | None = None, velocity_thresh: float | None = None) -> bool:
        pos_thresh = self.config.stable_thresh if stable_thresh is None else stable_thresh
        vel_thresh = self.config.stable_deriv_thresh if velocity_thresh is None else velocity_thresh
        return (
            self._iterations > _STABLE_ITERATIONS
            and abs(self._stable_pos) <= pos_thresh
            and (vel_thresh < 0 or abs(self._stable_vel) <= vel_thresh)
        )