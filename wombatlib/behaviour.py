"""Behaviours: units of work that take control of systems and run periodically."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum, auto
from typing import Callable, Iterable, Union

from .util import now

log = logging.getLogger(__name__)

DEFAULT_PERIOD = 0.02


class BehaviourState(Enum):
    INITIALISED = auto()
    RUNNING = auto()
    DONE = auto()
    TIMED_OUT = auto()
    INTERRUPTED = auto()


class ConcurrentReducer(Enum):
    """How a concurrent group decides it is finished."""

    ALL = auto()
    ANY = auto()
    FIRST = auto()


class DuplicateControlError(Exception):
    """Two behaviours running together would control the same system."""


class HasBehaviour:
    """A system that behaviours can take control of."""

    _active_behaviour: "Behaviour | None" = None
    _default_behaviour_producer: "Callable[[], Behaviour] | None" = None

    def set_default_behaviour(self, factory: Callable[[], "Behaviour"] | None) -> None:
        """Use ``factory`` to make a behaviour whenever the system is left without one."""
        self._default_behaviour_producer = factory

    @property
    def active_behaviour(self) -> "Behaviour | None":
        return self._active_behaviour


class Behaviour(ABC):
    """A periodic task. Subclasses implement ``on_tick`` and may hook start and stop."""

    def __init__(self, name: str = "<unnamed behaviour>", period: float = DEFAULT_PERIOD) -> None:
        self._name = name
        self.period = period
        self._state = BehaviourState.INITIALISED
        self._state_lock = threading.Lock()
        self._controls: dict[HasBehaviour, None] = {}
        self._timeout = 0.0
        self._timer = 0.0
        self._last_time = 0.0

    @property
    def name(self) -> str:
        return self._name

    @property
    def run_time(self) -> float:
        """Seconds spent running so far."""
        return self._timer

    @property
    def state(self) -> BehaviourState:
        return self._state

    @property
    def controlled(self) -> tuple[HasBehaviour, ...]:
        return tuple(self._controls)

    def controls(self, system: HasBehaviour | None) -> None:
        if system is not None:
            self._controls[system] = None

    def inherit(self, other: Behaviour) -> None:
        """Take control of every system that ``other`` controls."""
        for system in other.controlled:
            self.controls(system)

    def with_timeout(self, timeout: float) -> Behaviour:
        self._timeout = timeout
        return self

    def interrupt(self) -> None:
        self.stop(BehaviourState.INTERRUPTED)

    def set_done(self) -> None:
        self.stop(BehaviourState.DONE)

    def tick(self) -> bool:
        """Advance the behaviour one step; return whether it has finished."""
        starting = False
        with self._state_lock:
            if self._state is BehaviourState.INITIALISED:
                self._state = BehaviourState.RUNNING
                self._last_time = now()
                self._timer = 0.0
                starting = True
        if starting:
            self.on_start()

        if self._state is BehaviourState.RUNNING:
            current = now()
            dt = current - self._last_time
            self._last_time = current
            self._timer += dt

            if dt > 2 * self.period:
                log.warning(
                    "Behaviour missed deadline. Reduce Period. Dt=%s Dt(deadline)=%s. Bhvr: %s",
                    dt,
                    2 * self.period,
                    self.name,
                )

            if self._timeout > 0 and self._timer > self._timeout:
                self.stop(BehaviourState.TIMED_OUT)
            else:
                self.on_tick(dt)

        return self.is_finished()

    def is_running(self) -> bool:
        return self._state is BehaviourState.RUNNING

    def is_finished(self) -> bool:
        return self._state not in (BehaviourState.INITIALISED, BehaviourState.RUNNING)

    def stop(self, new_state: BehaviourState) -> None:
        with self._state_lock:
            previous, self._state = self._state, new_state
        if previous is BehaviourState.RUNNING:
            self.on_stop()

    def until(self, other: Behaviour) -> ConcurrentBehaviour:
        """Run this behaviour until ``other`` finishes."""
        group = ConcurrentBehaviour(ConcurrentReducer.FIRST)
        group.add(other)
        group.add(self)
        return group

    def on_start(self) -> None:
        """Called once, just before the first tick."""

    @abstractmethod
    def on_tick(self, dt: float) -> None:
        """Called on every tick while running, with the seconds since the last one."""

    def on_stop(self) -> None:
        """Called once when a running behaviour stops."""


class SequentialBehaviour(Behaviour):
    """Runs behaviours one after another."""

    def __init__(self, *behaviours: Behaviour) -> None:
        super().__init__()
        self._queue: deque[Behaviour] = deque()
        for behaviour in behaviours:
            self.add(behaviour)

    def add(self, behaviour: Behaviour) -> SequentialBehaviour:
        self._queue.append(behaviour)
        self.inherit(behaviour)
        return self

    @property
    def name(self) -> str:
        return self._queue[0].name if self._queue else self._name

    def on_tick(self, dt: float) -> None:
        queue = self._queue
        if not queue:
            self.set_done()
            return
        self.period = queue[0].period
        queue[0].tick()
        if queue[0].is_finished():
            queue.popleft()
            if queue:
                queue[0].tick()
            else:
                self.set_done()

    def on_stop(self) -> None:
        if self.state is not BehaviourState.DONE:
            while self._queue:
                self._queue.popleft().interrupt()


class ConcurrentBehaviour(Behaviour):
    """Runs behaviours side by side, each on its own thread."""

    def __init__(self, reducer: ConcurrentReducer = ConcurrentReducer.ALL) -> None:
        super().__init__()
        self._reducer = reducer
        self._children: list[Behaviour] = []
        self._children_finished: list[bool] = []
        self._finished_lock = threading.Lock()
        self._threads: list[threading.Thread] = []

    def add(self, behaviour: Behaviour) -> ConcurrentBehaviour:
        for system in behaviour.controlled:
            if system in self._controls:
                raise DuplicateControlError(
                    "Cannot run behaviours with the same controlled system concurrently "
                    f"(duplicate in: {behaviour.name})"
                )
            self.controls(system)
        self._children.append(behaviour)
        self._children_finished.append(False)
        return self

    @property
    def name(self) -> str:
        prefix = "ALL { " if self._reducer is ConcurrentReducer.ALL else "RACE {"
        return prefix + "".join(f"{child.name}, " for child in self._children) + "}"

    def _run_child(self, index: int, child: Behaviour) -> None:
        while not child.is_finished() and not self.is_finished():
            child.tick()
            time.sleep(child.period)
        if self.is_finished() and not child.is_finished():
            child.interrupt()
        with self._finished_lock:
            self._children_finished[index] = True

    def on_start(self) -> None:
        for index, child in enumerate(self._children):
            thread = threading.Thread(target=self._run_child, args=(index, child), daemon=True)
            self._threads.append(thread)
            thread.start()

    def on_tick(self, dt: float) -> None:
        with self._finished_lock:
            finished = list(self._children_finished)
        if self._reducer is ConcurrentReducer.FIRST:
            ok = bool(finished) and finished[0]
        elif self._reducer is ConcurrentReducer.ALL:
            ok = all(finished)
        else:
            ok = any(finished)
        if ok:
            self.set_done()

    def on_stop(self) -> None:
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()


class If(Behaviour):
    """Runs one of two behaviours, chosen by a condition checked when it starts."""

    def __init__(self, condition: Union[Callable[[], bool], bool]) -> None:
        super().__init__()
        if callable(condition):
            self._condition = condition
        else:
            value = bool(condition)
            self._condition = lambda: value
        self._then: Behaviour | None = None
        self._else: Behaviour | None = None
        self._value = False

    def then(self, behaviour: Behaviour) -> If:
        self._then = behaviour
        self.inherit(behaviour)
        return self

    def else_(self, behaviour: Behaviour) -> If:
        self._else = behaviour
        self.inherit(behaviour)
        return self

    def on_start(self) -> None:
        self._value = bool(self._condition())

    def on_tick(self, dt: float) -> None:
        active = self._then if self._value else self._else
        if active is not None:
            active.tick()
        if active is None or active.is_finished():
            self.set_done()
        if self.is_finished() and active is not None and not active.is_finished():
            active.interrupt()


class WaitFor(Behaviour):
    """Finishes once ``predicate`` returns true."""

    def __init__(self, predicate: Callable[[], bool]) -> None:
        super().__init__()
        self._predicate = predicate

    def on_tick(self, dt: float) -> None:
        if self._predicate():
            self.set_done()


class WaitTime(Behaviour):
    """Finishes after a number of seconds, fixed or computed when it starts."""

    def __init__(self, duration: Union[float, Callable[[], float]]) -> None:
        super().__init__()
        if callable(duration):
            self._duration_fn = duration
        else:
            fixed = float(duration)
            self._duration_fn = lambda: fixed
        self._duration = 0.0

    def on_start(self) -> None:
        self._duration = self._duration_fn()

    def on_tick(self, dt: float) -> None:
        if self.run_time > self._duration:
            self.set_done()


class Print(Behaviour):
    """Prints a message and finishes."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def on_tick(self, dt: float) -> None:
        print(self._message)
        self.set_done()


class BehaviourScheduler:
    """Runs scheduled behaviours and hands systems their default behaviours."""

    _instance: BehaviourScheduler | None = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._systems: list[HasBehaviour] = []
        self._threads: list[threading.Thread] = []
        self._lock = threading.RLock()

    @classmethod
    def instance(cls) -> BehaviourScheduler:
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def register(self, system: HasBehaviour) -> None:
        self._systems.append(system)

    def _run(self, behaviour: Behaviour) -> None:
        while not behaviour.is_finished():
            with self._lock:
                behaviour.tick()
            time.sleep(behaviour.period)

    def schedule(self, behaviour: Behaviour) -> None:
        """Start ``behaviour``, interrupting whatever held its systems."""
        if behaviour.state is not BehaviourState.INITIALISED:
            raise ValueError("Cannot reuse Behaviours!")
        with self._lock:
            for system in behaviour.controlled:
                if system._active_behaviour is not None:
                    system._active_behaviour.interrupt()
                system._active_behaviour = behaviour
            thread = threading.Thread(target=self._run, args=(behaviour,), daemon=True)
            self._threads.append(thread)
            thread.start()

    def tick(self) -> None:
        with self._lock:
            for system in self._systems:
                active = system._active_behaviour
                producer = system._default_behaviour_producer
                if active is not None:
                    if active.is_finished():
                        if producer is None:
                            system._active_behaviour = None
                        else:
                            self.schedule(producer())
                elif producer is not None:
                    self.schedule(producer())

    def interrupt_all(self) -> None:
        with self._lock:
            for system in self._systems:
                if system._active_behaviour is not None:
                    system._active_behaviour.interrupt()

    def close(self) -> None:
        """Interrupt every active behaviour and wait for their threads."""
        self.interrupt_all()
        for thread in self._threads:
            thread.join()
        self._threads.clear()

    def __enter__(self) -> BehaviourScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()