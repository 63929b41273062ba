"""An in-process network table store with change listeners."""

from __future__ import annotations

import itertools
import math
import threading
from typing import Any, Callable

Listener = Callable[["NetworkTable", str, Any], None]

_MISSING = object()
_handles = itertools.count(1)
_tables: dict[str, NetworkTable] = {}
_tables_lock = threading.Lock()


def _normalise(path: str) -> str:
    return "/" + path.strip("/")


class NetworkTable:
    """A named group of entries. Listeners fire when an entry's value changes."""

    def __init__(self, path: str) -> None:
        self.path = _normalise(path)
        self._values: dict[str, Any] = {}
        self._listeners: dict[int, tuple[str, Listener]] = {}
        self._lock = threading.RLock()

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            old = self._values.get(key, _MISSING)
            self._values[key] = value
            callbacks = [cb for k, cb in self._listeners.values() if k == key]
        if old is _MISSING or old != value:
            for callback in callbacks:
                callback(self, key, value)

    def subtable(self, name: str) -> NetworkTable:
        return get_table(f"{self.path}/{name}")

    def add_listener(self, key: str, callback: Listener) -> int:
        """Call ``callback(table, key, value)`` on each change of ``key``."""
        handle = next(_handles)
        with self._lock:
            self._listeners[handle] = (key, callback)
        return handle

    def remove_listener(self, handle: int) -> None:
        with self._lock:
            self._listeners.pop(handle, None)


def get_table(path: str) -> NetworkTable:
    """Return the shared table at ``path``, creating it on first use."""
    path = _normalise(path)
    with _tables_lock:
        table = _tables.get(path)
        if table is None:
            table = _tables[path] = NetworkTable(path)
        return table


class NTBound:
    """Publishes a value to a table entry and reports later changes to a callback."""

    def __init__(self, table: NetworkTable, name: str, value: Any, on_update: Callable[[Any], None]) -> None:
        self.table = table
        self.name = name
        self._on_update = on_update
        table.set(name, value)
        self._handle: int | None = table.add_listener(name, self._notify)

    def _notify(self, table: NetworkTable, key: str, value: Any) -> None:
        self._on_update(value)

    def close(self) -> None:
        if self._handle is not None:
            self.table.remove_listener(self._handle)
            self._handle = None

    def __enter__(self) -> NTBound:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def write_pose(table: NetworkTable, x: float, y: float, angle: float, z: float | None = None) -> None:
    """Write a pose; ``angle`` is in radians and is stored in degrees."""
    table.set("x", x)
    table.set("y", y)
    if z is not None:
        table.set("z", z)
    table.set("angle", math.degrees(angle))