import pytest

from wombatlib.voltage_controller import MotorVoltageController, VoltageController


class RecordingMotor:
    def __init__(self) -> None:
        self.value = 0.0
        self.is_inverted = False

    def set(self, speed: float) -> None:
        self.value = speed

    def get(self) -> float:
        return self.value

    def set_inverted(self, invert: bool) -> None:
        self.is_inverted = invert


def test_voltage_round_trip():
    controller = MotorVoltageController(RecordingMotor())
    controller.set_voltage(6.0)
    assert controller.voltage() == pytest.approx(6.0)


def test_set_voltage_writes_fraction_of_bus():
    motor = RecordingMotor()
    controller = MotorVoltageController(motor, input_voltage=10.0)
    controller.set_voltage(5.0)
    assert motor.value * controller.bus_voltage() == pytest.approx(5.0)


def test_bus_voltage_from_callable():
    controller = MotorVoltageController(RecordingMotor(), input_voltage=lambda: 11.0)
    assert controller.bus_voltage() == 11.0


@pytest.mark.parametrize("demand", [20.0, -20.0])
def test_estimated_real_voltage_is_clamped(demand):
    controller = MotorVoltageController(RecordingMotor(), input_voltage=12.0)
    controller.set_voltage(demand)
    estimated = controller.estimated_real_voltage()
    assert abs(estimated) == pytest.approx(controller.bus_voltage())
    assert (estimated > 0) == (demand > 0)


def test_estimated_real_voltage_within_range_is_unchanged():
    controller = MotorVoltageController(RecordingMotor())
    controller.set_voltage(3.5)
    assert controller.estimated_real_voltage() == pytest.approx(3.5)


def test_set_inverted_delegates():
    motor = RecordingMotor()
    MotorVoltageController(motor).set_inverted(True)
    assert motor.is_inverted is True


def test_inverted_follows_bus_power():
    assert MotorVoltageController(RecordingMotor(), input_voltage=12.0).inverted() is True
    assert MotorVoltageController(RecordingMotor(), input_voltage=0.0).inverted() is False


def test_voltage_controller_is_abstract():
    with pytest.raises(TypeError):
        VoltageController()