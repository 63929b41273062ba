"""Motor outputs commanded in volts rather than as a fraction of full power."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Protocol, Union

NOMINAL_BATTERY_VOLTAGE = 12.0


class MotorController(Protocol):
    """A motor output driven by a duty cycle between -1 and 1."""

    def set(self, speed: float) -> None: ...

    def get(self) -> float: ...

    def set_inverted(self, invert: bool) -> None: ...


class VoltageController(ABC):
    """Like a motor controller, but commanded in volts."""

    @abstractmethod
    def set_voltage(self, voltage: float) -> None:
        """Set the voltage of the output."""

    @abstractmethod
    def voltage(self) -> float:
        """The voltage currently commanded."""

    @abstractmethod
    def set_inverted(self, invert: bool) -> None:
        """Set whether the output is inverted."""

    @abstractmethod
    def inverted(self) -> bool:
        """Whether the output is inverted."""

    def battery_voltage(self) -> float:
        """The supply voltage the output is limited to."""
        return NOMINAL_BATTERY_VOLTAGE

    def estimated_real_voltage(self) -> float:
        """The commanded voltage, clamped to what the battery can supply."""
        vb = self.battery_voltage()
        return min(max(-vb, self.voltage()), vb)


class MotorVoltageController(VoltageController):
    """Drives a duty-cycle motor controller from voltage commands."""

    def __init__(
        self,
        motor_controller: MotorController,
        input_voltage: Union[float, Callable[[], float]] = NOMINAL_BATTERY_VOLTAGE,
    ) -> None:
        self._motor_controller = motor_controller
        self._input_voltage = input_voltage

    def bus_voltage(self) -> float:
        source = self._input_voltage
        return float(source() if callable(source) else source)

    def battery_voltage(self) -> float:
        return self.bus_voltage()

    def set_voltage(self, voltage: float) -> None:
        self._motor_controller.set(voltage / self.bus_voltage())

    def voltage(self) -> float:
        return self._motor_controller.get() * self.bus_voltage()

    def set_inverted(self, invert: bool) -> None:
        self._motor_controller.set_inverted(invert)

    def inverted(self) -> bool:
        """True whenever the bus is powered."""
        return bool(self.bus_voltage())