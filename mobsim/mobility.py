"""Discrete-event clock and the base mobility model."""

from __future__ import annotations

import heapq
import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

from mobsim.geometry import Vector


@dataclass(eq=False)
class EventId:
    """Handle on a scheduled event; it can be cancelled before it fires."""

    time: float
    cancelled: bool = False
    expired: bool = field(default=False)

    def cancel(self) -> None:
        """Prevent the event from running."""
        self.cancelled = True

    @property
    def is_running(self) -> bool:
        """True while the event is still pending."""
        return not (self.cancelled or self.expired)


class Simulator:
    """A simple discrete-event scheduler with time in seconds."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, EventId, Callable[..., Any], tuple]] = []
        self._order = itertools.count()

    def now(self) -> float:
        """Current simulation time in seconds."""
        return self._now

    def schedule(self, delay: float, callback: Callable[..., Any], *args: Any) -> EventId:
        """Run ``callback(*args)`` after ``delay`` seconds."""
        if delay < 0:
            raise ValueError(f"cannot schedule an event in the past (delay={delay})")
        event = EventId(self._now + delay)
        heapq.heappush(self._queue, (event.time, next(self._order), event, callback, args))
        return event

    def schedule_now(self, callback: Callable[..., Any], *args: Any) -> EventId:
        """Run ``callback(*args)`` at the current time, after pending events of this time."""
        return self.schedule(0.0, callback, *args)

    def run(self, until: float | None = None) -> None:
        """Process events in time order, up to and including ``until`` if given."""
        while self._queue:
            time, _, event, callback, args = self._queue[0]
            if until is not None and time > until:
                break
            heapq.heappop(self._queue)
            if event.cancelled:
                continue
            self._now = time
            event.expired = True
            callback(*args)
        if until is not None and until > self._now:
            self._now = until


class MobilityModel(ABC):
    """Base class tracking position and velocity of an object over time."""

    def __init__(self, simulator: Simulator) -> None:
        self.simulator = simulator
        self.node: Node | None = None
        self._listeners: list[Callable[[MobilityModel], Any]] = []

    @property
    def position(self) -> Vector:
        """Current position."""
        return self._do_get_position()

    @position.setter
    def position(self, value: Vector) -> None:
        self._do_set_position(value)

    @property
    def velocity(self) -> Vector:
        """Current velocity."""
        return self._do_get_velocity()

    def add_course_change_listener(self, callback: Callable[[MobilityModel], Any]) -> None:
        """Call ``callback(model)`` whenever the course changes."""
        self._listeners.append(callback)

    def notify_course_change(self) -> None:
        """Tell every listener that the course has changed."""
        for listener in list(self._listeners):
            listener(self)

    def distance_from(self, other: MobilityModel) -> float:
        """Distance between this model's position and another's."""
        return self.position.distance_to(other.position)

    def assign_streams(self, stream: int) -> int:
        """Fix random streams starting at ``stream``; return how many were used."""
        return self._do_assign_streams(stream)

    def _do_assign_streams(self, stream: int) -> int:
        return 0

    @abstractmethod
    def _do_get_position(self) -> Vector: ...

    @abstractmethod
    def _do_set_position(self, position: Vector) -> None: ...

    @abstractmethod
    def _do_get_velocity(self) -> Vector: ...


class ConstantPositionMobilityModel(MobilityModel):
    """A model whose position stays put until it is set again."""

    def __init__(self, simulator: Simulator, position: Vector | None = None) -> None:
        super().__init__(simulator)
        self._position = position if position is not None else Vector()

    def _do_get_position(self) -> Vector:
        return self._position

    def _do_set_position(self, position: Vector) -> None:
        self._position = position
        self.notify_course_change()

    def _do_get_velocity(self) -> Vector:
        return Vector(0.0, 0.0, 0.0)


class Node:
    """A simulated object identified by a number, optionally carrying a mobility model."""

    def __init__(self, node_id: int, mobility: MobilityModel | None = None) -> None:
        self.node_id = node_id
        self._mobility: MobilityModel | None = None
        if mobility is not None:
            self.mobility = mobility

    @property
    def mobility(self) -> MobilityModel | None:
        """The mobility model attached to this node, if any."""
        return self._mobility

    @mobility.setter
    def mobility(self, model: MobilityModel) -> None:
        self._mobility = model
        model.node = self

    def __repr__(self) -> str:
        return f"Node({self.node_id})"