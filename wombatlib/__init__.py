"""Robot control building blocks: PID, behaviours, sensors, mechanisms, drivetrains and grid search."""

__version__ = "0.1.0"