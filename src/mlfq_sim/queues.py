"""Queue set — one FIFO ready queue per priority level.

Level 0 is the top (highest priority) queue.  Selection always scans
from the top down, so a waiting process at a higher level is dispatched
before any process at a lower level, no matter how long the lower one
has been waiting.  Inside a level, order is strictly first-in first-out.

Each queue is a ``deque`` so enqueue and dequeue are both O(1) and there
is no capacity ceiling.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mlfq_sim.process import Process


class QueueSet:
    """Ordered collection of per-level FIFO queues."""

    def __init__(self, *, num_levels: int) -> None:
        """Create *num_levels* empty queues.

        Args:
            num_levels: Number of priority levels (must be positive).

        Raises:
            ValueError: If *num_levels* is not positive.

        """
        if num_levels <= 0:
            msg = f"Queue set needs at least one level, got {num_levels}"
            raise ValueError(msg)
        self._queues: tuple[deque[Process], ...] = tuple(deque() for _ in range(num_levels))

    @property
    def num_levels(self) -> int:
        """Return the number of priority levels."""
        return len(self._queues)

    def _check_level(self, level: int) -> None:
        if not 0 <= level < len(self._queues):
            msg = f"Level {level} out of range 0..{len(self._queues) - 1}"
            raise IndexError(msg)

    def enqueue(self, level: int, process: Process) -> None:
        """Append *process* to the tail of the queue at *level*."""
        self._check_level(level)
        self._queues[level].append(process)

    def dequeue_highest_ready(self) -> Process | None:
        """Remove and return the head of the highest non-empty queue, or None."""
        for queue in self._queues:
            if queue:
                return queue.popleft()
        return None

    def is_empty(self) -> bool:
        """Return True if every queue is empty."""
        return not any(self._queues)

    def drain_below(self, level: int) -> list[Process]:
        """Remove and return every process waiting strictly below *level*.

        The bottom queue is drained first, then the next one up; each
        queue's own order is preserved in the result.
        """
        self._check_level(level)
        drained: list[Process] = []
        for queue in reversed(self._queues[level + 1 :]):
            drained.extend(queue)
            queue.clear()
        return drained

    def level(self, level: int) -> tuple[Process, ...]:
        """Return a snapshot of the queue at *level*, head first."""
        self._check_level(level)
        return tuple(self._queues[level])

    def snapshot(self) -> tuple[tuple[Process, ...], ...]:
        """Return a snapshot of every queue, top level first."""
        return tuple(tuple(queue) for queue in self._queues)

    def __len__(self) -> int:
        """Return the total number of waiting processes."""
        return sum(len(queue) for queue in self._queues)

    def __iter__(self) -> Iterator[Process]:
        """Iterate over waiting processes, top level first."""
        for queue in self._queues:
            yield from queue

    def __contains__(self, process: object) -> bool:
        """Return True if *process* is waiting in any queue."""
        return any(process in queue for queue in self._queues)
