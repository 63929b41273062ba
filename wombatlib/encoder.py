"""Encoders measured in ticks, and a software encoder for simulation."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum

_DISTANCE_PER_TICK = 0.02032


class EncoderKind(Enum):
    """How raw ticks map to an angle."""

    ROTATION_TICKS = 0
    """Ticks count fractions of a rotation; offsets are ignored."""
    ABSOLUTE = 1
    """Ticks are degrees, less the stored offset."""
    RELATIVE_DEGREES = 2
    """Ticks are degrees, less the stored offset."""


class SimCapableEncoder(ABC):
    """A handle a simulation uses to drive an encoder's readings."""

    @abstractmethod
    def set_turns(self, turns: float) -> None:
        """Set the position, in turns."""

    @abstractmethod
    def set_turn_velocity(self, speed: float) -> None:
        """Set the velocity, in turns per second."""


class Encoder(ABC):
    """An encoder reporting ticks; positions in radians, velocities in rad/s."""

    def __init__(
        self,
        ticks_per_rotation: float,
        reduction: float = 1.0,
        kind: EncoderKind = EncoderKind.ROTATION_TICKS,
    ) -> None:
        self._ticks_per_rotation = ticks_per_rotation
        self.reduction = reduction
        self.kind = kind
        self._offset = 0.0

    @abstractmethod
    def raw_ticks(self) -> float:
        """Ticks as read from the device."""

    @abstractmethod
    def tick_velocity(self) -> float:
        """Ticks per second."""

    def zero(self) -> None:
        self._offset = self.raw_ticks()

    def set_position(self, position: float) -> None:
        """Set the offset from a position given in degrees."""
        self._offset = math.radians(position - self.raw_ticks() * 360)

    def set_offset(self, offset: float) -> None:
        """Set the offset, in radians."""
        self._offset = offset

    def ticks(self) -> float:
        return self.raw_ticks()

    def ticks_per_rotation(self) -> float:
        return self._ticks_per_rotation * self.reduction

    def set_reduction(self, reduction: float) -> None:
        self.reduction = reduction

    def position(self) -> float:
        """Angle in radians."""
        if self.kind is EncoderKind.ROTATION_TICKS:
            return self.ticks() / self.ticks_per_rotation() * math.tau
        return math.radians(self.ticks()) - self._offset

    def distance(self) -> float:
        return self.ticks() * _DISTANCE_PER_TICK

    def angular_velocity(self) -> float:
        """Angular velocity in radians per second."""
        return self.tick_velocity() / self.ticks_per_rotation() * math.tau

    def make_sim_encoder(self) -> SimCapableEncoder | None:
        """A simulation handle, or None when the encoder cannot be simulated."""
        return None


class _SimHandle(SimCapableEncoder):
    def __init__(self, encoder: SimulatedEncoder) -> None:
        self._encoder = encoder

    def set_turns(self, turns: float) -> None:
        self._encoder.sim_ticks = turns * self._encoder.ticks_per_rotation()

    def set_turn_velocity(self, speed: float) -> None:
        self._encoder.sim_velocity = speed * self._encoder.ticks_per_rotation()


class SimulatedEncoder(Encoder):
    """An encoder whose readings are set in software."""

    def __init__(
        self,
        ticks_per_rotation: float = 1.0,
        reduction: float = 1.0,
        kind: EncoderKind = EncoderKind.ROTATION_TICKS,
    ) -> None:
        super().__init__(ticks_per_rotation, reduction, kind)
        self.sim_ticks = 0.0
        self.sim_velocity = 0.0

    def raw_ticks(self) -> float:
        return self.sim_ticks

    def tick_velocity(self) -> float:
        return self.sim_velocity

    def make_sim_encoder(self) -> SimCapableEncoder:
        return _SimHandle(self)