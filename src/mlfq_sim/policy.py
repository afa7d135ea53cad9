"""MLFQ scheduling policy — quantum, allotment, demotion and reset rules.

The policy holds the only code that changes a process's scheduling
fields.  It answers three questions for the driver:

1. **How long may this process run now?**  At most one quantum, never
   more than its remaining burst, and never past its level's allotment.
2. **What happens after the slice?**  The process completes, is demoted
   one level (allotment used up), or goes to the back of its own queue.
3. **How do we stop starvation?**  A priority reset moves every waiting
   process below the top back up to the top queue.

Rules in short::

    slice   = min(remaining, quantum[L], allotment[L] - time_in_level)
    outcome = COMPLETED  if remaining == 0
              DEMOTED    if time_in_level >= allotment[L] and L is not bottom
              REQUEUED   otherwise (time_in_level restarts at the bottom)
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from mlfq_sim.config import ResetMode
from mlfq_sim.process import TOP_LEVEL

if TYPE_CHECKING:
    from mlfq_sim.config import MLFQConfig
    from mlfq_sim.process import Process
    from mlfq_sim.queues import QueueSet


class Outcome(StrEnum):
    """Where a process goes after it has run for a slice."""

    COMPLETED = "completed"
    DEMOTED = "demoted"
    REQUEUED = "requeued"


class MLFQPolicy:
    """Pure scheduling rules for a fixed :class:`MLFQConfig`."""

    def __init__(self, config: MLFQConfig) -> None:
        """Create a policy bound to *config*."""
        self._config = config

    @property
    def config(self) -> MLFQConfig:
        """Return the configuration this policy applies."""
        return self._config

    @property
    def num_levels(self) -> int:
        """Return the number of priority levels."""
        return self._config.num_levels

    def quantum(self, level: int) -> int:
        """Return the quantum for *level*."""
        return self._config.levels[level].quantum

    def allotment(self, level: int) -> int | None:
        """Return the allotment for *level*, or None if unbounded."""
        return self._config.levels[level].allotment

    def execution_slice(self, process: Process, level: int) -> int:
        """Return how many time units *process* may run at *level*.

        Raises:
            RuntimeError: If the process was left at a level whose
                allotment it has already used up.

        """
        length = min(process.remaining_time, self.quantum(level))
        allotment = self.allotment(level)
        if allotment is not None:
            headroom = allotment - process.time_in_level
            if headroom <= 0 and process.remaining_time > 0:
                msg = (
                    f"Process {process.pid} has no allotment left at level {level} "
                    f"({process.time_in_level}/{allotment})"
                )
                raise RuntimeError(msg)
            length = min(length, headroom)
        return max(length, 0)

    def apply_execution(self, process: Process, level: int, length: int, *, now: int) -> Outcome:
        """Charge a slice of *length* started at *now* and decide the outcome.

        On DEMOTED the process has already been moved to the next level
        down; on REQUEUED its level is unchanged.  The caller routes the
        process to ``process.current_level`` in both cases.
        """
        process._charge(length, now=now)  # noqa: SLF001
        if process.is_complete:
            return Outcome.COMPLETED

        allotment = self.allotment(level)
        if allotment is None or process.time_in_level < allotment:
            return Outcome.REQUEUED

        bottom = self._config.bottom_level
        if level < bottom:
            process._move_to_level(level + 1)  # noqa: SLF001
            return Outcome.DEMOTED
        # Nowhere lower to go: stay at the bottom with a fresh allotment.
        process._move_to_level(bottom)  # noqa: SLF001
        return Outcome.REQUEUED

    def priority_reset(self, queue_set: QueueSet) -> list[Process]:
        """Move every process waiting below the top level into the top queue.

        Processes from the bottom queue are appended first, then the next
        queue up; each queue keeps its internal order.

        Returns:
            The promoted processes in the order they were appended.

        """
        promoted = queue_set.drain_below(TOP_LEVEL)
        for process in promoted:
            process._move_to_level(TOP_LEVEL)  # noqa: SLF001
            queue_set.enqueue(TOP_LEVEL, process)
        return promoted

    def is_reset_due(self, now: int, *, last_reset: int) -> bool:
        """Return True if a priority reset should fire at clock value *now*.

        Args:
            now: Clock value right after a slice.
            last_reset: Clock value of the previous reset (0 if none yet).

        """
        period = self._config.reset_period
        if now <= 0 or now == last_reset:
            return False
        if self._config.reset_mode is ResetMode.EXACT:
            return now % period == 0
        # CROSSING: a multiple of the period lies in (last_reset, now].
        return now // period > last_reset // period
