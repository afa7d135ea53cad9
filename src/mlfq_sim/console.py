"""Console presentation — render simulation events as a text trace.

``ConsolePrinter`` is an observer: the simulator hands it events and it
writes one block of text per event.  Output goes through a ``write``
callable (``print`` by default) so the trace can be captured in tests
or redirected anywhere.

The formatting helpers are pure functions returning strings, so they
are testable without any I/O at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mlfq_sim.events import (
    PriorityReset,
    ProcessArrived,
    ProcessCompleted,
    ProcessDemoted,
    ProcessRunning,
    QueueSnapshot,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from mlfq_sim.events import SimulationEvent
    from mlfq_sim.metrics import SimulationMetrics

_RULE_WIDTH = 37


def format_snapshot(snapshot: QueueSnapshot) -> str:
    """Format the contents of every queue, top level first."""
    lines = [f"--- Current Queue State at time {snapshot.time} ---"]
    for level, queue in enumerate(snapshot.levels):
        entries = " ".join(f"[P{q.pid}, Remaining Time: {q.remaining_time}]" for q in queue)
        lines.append(f"Queue {level}: {entries}".rstrip())
    lines.append("-" * _RULE_WIDTH)
    return "\n".join(lines)


def format_event(event: SimulationEvent) -> str:
    """Format a single event as one or more lines of text."""
    match event:
        case ProcessArrived(pid=pid, time=time):
            return f"Process {pid} arrives at time {time}"
        case QueueSnapshot():
            return format_snapshot(event)
        case ProcessRunning(pid=pid, level=level, duration=duration):
            return f"Running Process {pid} from Queue {level} for {duration} time units"
        case ProcessCompleted(pid=pid, time=time):
            return f"Process {pid} completed at time {time}"
        case ProcessDemoted(pid=pid, to_level=to_level):
            return f"Process {pid} demoted to Queue {to_level}"
        case PriorityReset(time=time, promoted=promoted):
            lines = [f"Priority reset at time {time}"]
            lines.extend(f"Process {pid} moved to Queue 0 during reset" for pid in promoted)
            return "\n".join(lines)
    msg = f"Unknown event {event!r}"
    raise TypeError(msg)


def format_metrics(metrics: SimulationMetrics) -> str:
    """Format the per-process table and the aggregate summary."""
    columns = ("PID", "ARRIVE", "BURST", "FIRST", "DONE", "TURN", "WAIT", "RESP")
    widths = (5, 7, 6, 6, 6, 6, 6, 6)
    lines = [" ".join(f"{name:>{width}}" for name, width in zip(columns, widths, strict=True))]
    for p in sorted(metrics.processes, key=lambda m: m.pid):
        lines.append(
            f"{p.pid:>5} {p.arrival_time:>7} {p.burst_time:>6} {p.first_run_time:>6} "
            f"{p.completion_time:>6} {p.turnaround_time:>6} {p.waiting_time:>6} "
            f"{p.response_time:>6}"
        )
    lines.extend(
        [
            "",
            f"Completed:            {metrics.completed}",
            f"Makespan:             {metrics.makespan}",
            f"Avg turnaround time:  {metrics.avg_turnaround_time:.2f}",
            f"Avg waiting time:     {metrics.avg_waiting_time:.2f}",
            f"Avg response time:    {metrics.avg_response_time:.2f}",
            f"Throughput:           {metrics.throughput:.4f}",
            f"Context switches:     {metrics.context_switches}",
            f"Demotions:            {metrics.demotions}",
            f"Priority resets:      {metrics.priority_resets}",
            f"Idle ticks:           {metrics.idle_ticks}",
        ]
    )
    return "\n".join(lines)


class ConsolePrinter:
    """Observer that writes each event as text."""

    def __init__(self, write: Callable[[str], object] = print) -> None:
        """Create a printer.

        Args:
            write: Called once per event with the formatted text.

        """
        self._write = write

    def notify(self, event: SimulationEvent) -> None:
        """Format *event* and write it out."""
        text = format_event(event)
        if isinstance(event, QueueSnapshot):
            text = f"\n{text}\n"
        self._write(text)
