"""Observer events — what the simulator reports while it runs.

The scheduling core never prints anything.  Instead it emits immutable
event records to every registered observer.  Observers may render them
(see ``mlfq_sim.console``), record them for tests, or ship them over
HTTP, but nothing they do can influence a scheduling decision.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Protocol, TypeAlias, TypeVar

E = TypeVar("E")


@dataclass(frozen=True)
class QueuedProcess:
    """A process as it appears in a queue snapshot."""

    pid: int
    remaining_time: int


@dataclass(frozen=True)
class ProcessArrived:
    """A process was admitted to the top queue."""

    pid: int
    time: int


@dataclass(frozen=True)
class QueueSnapshot:
    """Contents of every queue, top level first."""

    time: int
    levels: tuple[tuple[QueuedProcess, ...], ...]


@dataclass(frozen=True)
class ProcessRunning:
    """A process was given the CPU for *duration* time units."""

    pid: int
    level: int
    time: int
    duration: int


@dataclass(frozen=True)
class ProcessCompleted:
    """A process received its whole burst."""

    pid: int
    time: int


@dataclass(frozen=True)
class ProcessDemoted:
    """A process used up its allotment and moved one level down."""

    pid: int
    from_level: int
    to_level: int
    time: int


@dataclass(frozen=True)
class PriorityReset:
    """Every process waiting below the top level was moved back to the top."""

    time: int
    promoted: tuple[int, ...]


SimulationEvent: TypeAlias = (
    ProcessArrived
    | QueueSnapshot
    | ProcessRunning
    | ProcessCompleted
    | ProcessDemoted
    | PriorityReset
)


class Observer(Protocol):
    """Anything that wants to hear about simulation events."""

    def notify(self, event: SimulationEvent) -> None:
        """Receive one event."""
        ...  # pragma: no cover


class EventRecorder:
    """Observer that keeps every event in order."""

    def __init__(self) -> None:
        """Create an empty recorder."""
        self._events: list[SimulationEvent] = []

    def notify(self, event: SimulationEvent) -> None:
        """Append *event* to the recording."""
        self._events.append(event)

    @property
    def events(self) -> list[SimulationEvent]:
        """Return all recorded events in emission order."""
        return list(self._events)

    def of_type(self, kind: type[E]) -> list[E]:
        """Return only the recorded events of class *kind*."""
        return [event for event in self._events if isinstance(event, kind)]

    def clear(self) -> None:
        """Forget all recorded events."""
        self._events.clear()


def event_to_dict(event: SimulationEvent) -> dict[str, Any]:
    """Return a JSON-friendly dict with the event class name under ``type``."""
    data = asdict(event)
    data["type"] = type(event).__name__
    return data
