"""Gyroscopes, and handles that let a simulation set their readings."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod


class SimCapableGyro(ABC):
    """A handle a simulation uses to drive a gyro's heading."""

    @abstractmethod
    def set_angle(self, angle: float) -> None:
        """Set the heading, in radians."""


class Gyro(ABC):
    """A heading sensor reporting its angle in degrees, clockwise positive."""

    @abstractmethod
    def calibrate(self) -> None: ...

    @abstractmethod
    def reset(self) -> None: ...

    @abstractmethod
    def angle(self) -> float:
        """Heading in degrees."""

    @abstractmethod
    def rate(self) -> float:
        """Rate of turn in degrees per second."""

    def rotation(self) -> float:
        """Heading in radians, counter-clockwise positive."""
        return math.radians(-self.angle())

    @abstractmethod
    def make_sim_gyro(self) -> SimCapableGyro:
        """A handle for driving this gyro from a simulation."""


class _NavXSimGyro(SimCapableGyro):
    def __init__(self, navx: NavX) -> None:
        self._navx = navx

    def set_angle(self, angle: float) -> None:
        self._navx.set_angle(angle)


class NavX(Gyro):
    """A NavX gyro whose heading is held in software."""

    def __init__(self) -> None:
        self._angle = 0.0
        self.calibrated = False

    def calibrate(self) -> None:
        """Mark the gyro as calibrated; a software gyro has no drift to measure."""
        self.calibrated = True

    def reset(self) -> None:
        self._angle = 0.0

    def angle(self) -> float:
        return self._angle

    def rate(self) -> float:
        return 0.0

    def pitch(self) -> float:
        """Pitch in radians."""
        return 0.0

    def roll(self) -> float:
        """Roll in radians."""
        return 0.0

    def set_angle(self, angle: float) -> None:
        """Set the heading from an angle in radians."""
        self._angle = math.degrees(angle)

    def make_sim_gyro(self) -> SimCapableGyro:
        return _NavXSimGyro(self)