# wombatlib

Building blocks for robot control code, written against plain floats
(metres, radians, seconds, volts, amps) rather than hardware objects:

- a PID controller with angle wrapping, an integral zone and stability
  detection, whose gains are published to an in-process table store;
- a behaviour framework (sequential, concurrent, conditional and timed
  behaviours) with a scheduler that runs each behaviour on its own thread;
- encoder and gyro abstractions with software implementations for
  simulation;
- a DC motor model and mechanism subsystems: arm, elevator, shooter and a
  differential drivetrain;
- a lookup-table interpolator, an occupancy grid with A* path search, and
  kinematics plus a physics model for a two-mecanum, one-omni ("WASP") base.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Modules

- `wombatlib.control_util`: `deadzone(val, deadzone=0.05)` and `spow2(val)`
  (sign-preserving square) for shaping joystick input.
- `wombatlib.lut`: `LUT` and `LUTPoint`. `LUT.estimate(x)` interpolates
  linearly between points given in ascending `x`, clamps to the end values
  outside them, and returns 0 for an empty table.
- `wombatlib.grid`: `OccupancyGrid(xmin, xmax, ymin, ymax, ux, uy)` or
  `OccupancyGrid.from_matrix(...)`. Cells are `(x, y)` tuples and anything
  outside the grid counts as occupied. `a_star` searches between the free
  cells nearest the given ends (`closest_valid_node`); `a_star_strict`
  returns an empty list when no path exists. Paths are lists of
  `GridPathNode` (cell centre and cost). `remap` maps a value between ranges.
- `wombatlib.ntutil`: `get_table(path)` returns a shared `NetworkTable`
  with `get`, `set`, `subtable`, `add_listener` and `remove_listener`;
  listeners fire only when a value changes. `NTBound` publishes a value and
  reports later changes (usable as a context manager). `write_pose` stores
  `x`, `y`, optional `z` and the angle in degrees.
- `wombatlib.pid`: `PIDConfig` (gains and thresholds; edits to its table
  entries are written back to the fields) and `PIDController` with the
  `setpoint` and `error` properties, `wrap`, `calculate`, `reset` and
  `is_stable`.
- `wombatlib.util`: `now()` (monotonic seconds), `invert(system)` and
  `start_robot(robot_func)`.
- `wombatlib.behaviour`: `Behaviour`, `SequentialBehaviour`,
  `ConcurrentBehaviour` (reducers `ALL`, `ANY`, `FIRST`), `If`, `WaitFor`,
  `WaitTime`, `Print`, `HasBehaviour` and `BehaviourScheduler`.
  `Behaviour.until(other)` runs a behaviour until another finishes; adding
  two behaviours that control the same system to a concurrent group raises
  `DuplicateControlError`.
- `wombatlib.encoder`: the `Encoder` base class, `EncoderKind`, and
  `SimulatedEncoder`, whose readings are set through `make_sim_encoder()`.
- `wombatlib.voltage_controller`: `VoltageController` and
  `MotorVoltageController`, which drives any object with `set`, `get` and
  `set_inverted` from voltage commands.
- `wombatlib.gyro`: the `Gyro` base class and `NavX`, a software gyro
  whose heading is set with `set_angle` or through `make_sim_gyro()`.
- `wombatlib.gearbox`: `DCMotor` (for example `DCMotor.cim(2)`) with
  `voltage`, `speed`, `current` and `torque`, and `Gearbox`.
- `wombatlib.arm`, `wombatlib.elevator`, `wombatlib.shooter`: subsystems
  advanced by `on_update(dt)`; the shooter also has the `ShooterConstant`
  and `ShooterSpinup` behaviours.
- `wombatlib.drivetrain`: `ChassisSpeeds`, `DifferentialDriveKinematics`,
  `Drivetrain`, and the behaviours `DrivetrainDriveDistance` and
  `DrivetrainTurnToAngle`.
- `wombatlib.wasp`: `WaspDriveKinematics`, `HolonomicWheelSim` and
  `WASPSim`.

## Example

```python
from wombatlib.pid import PIDConfig, PIDController

config = PIDConfig("arm/pid", kp=2.0, stable_thresh=0.05)
pid = PIDController("arm/pid", config)
pid.setpoint = 1.0

output = pid.calculate(pv=0.2, dt=0.02)
```

```python
from wombatlib.lut import LUT, LUTPoint

table = LUT([LUTPoint(0, 0), LUTPoint(10, 100)])
table.estimate(2.5)  # 25.0
```

## What it does not do

- It talks to no hardware: there are no motor-controller, encoder or gyro
  drivers. Supply your own objects to `MotorVoltageController`, or
  subclass `Encoder` and `Gyro`. `NavX` always reports zero rate, pitch
  and roll.
- The table store lives in the current process only; nothing is sent over
  a network.
- There is no swerve drive and no pose estimation. `Drivetrain`'s pose
  state only records the target and drives no output.
- There is no command-line program.

## Running the tests

```
pytest
```