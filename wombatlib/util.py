"""Timing and start-up helpers shared by the robot code."""

from __future__ import annotations

import time
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def now() -> float:
    """Seconds on a monotonic clock, suitable for measuring intervals."""
    return time.monotonic()


def invert(system: T) -> T:
    """Mark ``system`` as inverted and hand it back."""
    system.set_inverted(True)
    return system


def start_robot(robot_func: Callable[[], Any]) -> int:
    """Run the robot entry point and report success."""
    robot_func()
    return 0