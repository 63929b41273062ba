"""Small helpers for shaping driver-control inputs."""


def deadzone(val: float, deadzone: float = 0.05) -> float:
    """Return ``val`` unless its magnitude is within ``deadzone``, in which case 0."""
    return val if abs(val) > deadzone else 0.0


def spow2(val: float) -> float:
    """Square ``val`` while keeping its sign (zero and negatives map to non-positive)."""
    return val * val * (1 if val > 0 else -1)