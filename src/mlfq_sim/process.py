"""Process record — the per-task state the MLFQ scheduler works on.

A process here is a purely CPU-bound job: it arrives at a fixed time,
needs a fixed amount of CPU (its *burst*), and leaves the system once
that burst has been fully delivered.

The record follows a small state machine so that misuse shows up as an
error instead of a silently corrupted simulation::

    NEW → READY ⇄ RUNNING → TERMINATED

- The driver admits a NEW process into the queue set (READY).
- Selecting it for a slice makes it RUNNING — it is in no queue.
- After the slice it is either back in a queue (READY) or finished
  (TERMINATED).

Scheduling fields (remaining time, level, time-in-level) are read-only
from the outside.  The policy changes them through the underscore hooks
so every invariant is enforced in one place.
"""

from __future__ import annotations

from enum import StrEnum

TOP_LEVEL = 0


class InvalidProcessSpecError(ValueError):
    """Raise when a process specification cannot be simulated.

    Examples: negative burst time, negative arrival time, duplicate id.
    """


def check_times(pid: int, arrival_time: int, burst_time: int) -> None:
    """Reject a negative arrival or burst time for process *pid*.

    Raises:
        InvalidProcessSpecError: If either time is negative.

    """
    if arrival_time < 0:
        msg = f"Process {pid}: arrival time must be non-negative, got {arrival_time}"
        raise InvalidProcessSpecError(msg)
    if burst_time < 0:
        msg = f"Process {pid}: burst time must be non-negative, got {burst_time}"
        raise InvalidProcessSpecError(msg)


class ProcessState(StrEnum):
    """Lifecycle states of a simulated process."""

    NEW = "new"
    READY = "ready"
    RUNNING = "running"
    TERMINATED = "terminated"


class Process:
    """A simulated CPU-bound process.

    The identity fields (``pid``, ``arrival_time``, ``burst_time``) never
    change.  ``remaining_time`` only goes down, and ``time_in_level``
    drops back to zero whenever ``current_level`` changes.
    """

    def __init__(self, *, pid: int, arrival_time: int, burst_time: int) -> None:
        """Create a process at the top level in the NEW state.

        Args:
            pid: Unique process identifier.
            arrival_time: Clock value at which the process becomes visible.
            burst_time: Total CPU time the process needs.

        Raises:
            InvalidProcessSpecError: If a time is negative.

        """
        check_times(pid, arrival_time, burst_time)
        self._pid = pid
        self._arrival_time = arrival_time
        self._burst_time = burst_time
        self._remaining_time = burst_time
        self._current_level = TOP_LEVEL
        self._time_in_level = 0
        self._last_run_time = 0
        self._first_run_time: int | None = None
        self._completion_time: int | None = None
        self._state = ProcessState.NEW

    @classmethod
    def create(cls, pid: int, arrival_time: int, burst_time: int) -> Process:
        """Return a new record at the top level with its full burst remaining."""
        return cls(pid=pid, arrival_time=arrival_time, burst_time=burst_time)

    @property
    def pid(self) -> int:
        """Return the unique process identifier."""
        return self._pid

    @property
    def arrival_time(self) -> int:
        """Return the time at which the process arrives."""
        return self._arrival_time

    @property
    def burst_time(self) -> int:
        """Return the original CPU burst."""
        return self._burst_time

    @property
    def remaining_time(self) -> int:
        """Return the CPU time still owed to this process."""
        return self._remaining_time

    @property
    def current_level(self) -> int:
        """Return the index of the priority level the process belongs to."""
        return self._current_level

    @property
    def time_in_level(self) -> int:
        """Return CPU time accrued at the current level."""
        return self._time_in_level

    @property
    def last_run_time(self) -> int:
        """Return the clock value at the start of the most recent slice."""
        return self._last_run_time

    @property
    def first_run_time(self) -> int | None:
        """Return the start of the first slice, or None if never run."""
        return self._first_run_time

    @property
    def completion_time(self) -> int | None:
        """Return the clock value at completion, or None if still live."""
        return self._completion_time

    @property
    def state(self) -> ProcessState:
        """Return the lifecycle state."""
        return self._state

    @property
    def is_complete(self) -> bool:
        """Return True once the whole burst has been delivered."""
        return self._remaining_time == 0

    def _transition(self, action: str, expected: ProcessState, target: ProcessState) -> None:
        """Enforce a lifecycle transition.

        Raises:
            RuntimeError: If the process is not in the expected state.

        """
        if self._state is not expected:
            msg = f"Cannot {action}: process {self._pid} is {self._state}, expected {expected}"
            raise RuntimeError(msg)
        self._state = target

    def admit(self) -> None:
        """Transition NEW → READY."""
        self._transition("admit", ProcessState.NEW, ProcessState.READY)

    def dispatch(self) -> None:
        """Transition READY → RUNNING."""
        self._transition("dispatch", ProcessState.READY, ProcessState.RUNNING)

    def preempt(self) -> None:
        """Transition RUNNING → READY."""
        self._transition("preempt", ProcessState.RUNNING, ProcessState.READY)

    def terminate(self, *, now: int) -> None:
        """Transition RUNNING → TERMINATED and stamp the completion time."""
        self._transition("terminate", ProcessState.RUNNING, ProcessState.TERMINATED)
        self._completion_time = now

    # -- Policy hooks -----------------------------------------------------

    def _charge(self, amount: int, *, now: int) -> None:
        """Deliver *amount* units of CPU starting at clock value *now*."""
        if amount < 0 or amount > self._remaining_time:
            msg = (
                f"Cannot charge {amount} to process {self._pid} "
                f"with {self._remaining_time} remaining"
            )
            raise RuntimeError(msg)
        self._remaining_time -= amount
        self._time_in_level += amount
        self._last_run_time = now
        if self._first_run_time is None:
            self._first_run_time = now

    def _move_to_level(self, level: int) -> None:
        """Place the process at *level* with a fresh time-in-level."""
        self._current_level = level
        self._time_in_level = 0

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return (
            f"Process(pid={self._pid}, remaining={self._remaining_time}, "
            f"level={self._current_level}, state={self._state})"
        )
