"""Performance metrics — how well did the schedule treat each process?

Classic per-process measures, all in simulated time units:

- **turnaround** = completion − arrival (total time in the system).
- **waiting**    = turnaround − burst (time spent ready but not running).
- **response**   = first run − arrival (how long until first served).

The aggregate adds the schedule-wide counters the driver keeps:
context switches (slices dispatched), demotions, priority resets and
idle ticks, plus throughput over the makespan.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mlfq_sim.process import Process


@dataclass(frozen=True)
class ProcessMetrics:
    """Timing figures for one completed process."""

    pid: int
    arrival_time: int
    burst_time: int
    first_run_time: int
    completion_time: int

    @classmethod
    def from_process(cls, process: Process) -> ProcessMetrics:
        """Capture the metrics of a completed *process*.

        Raises:
            RuntimeError: If the process has not completed.

        """
        if process.completion_time is None or process.first_run_time is None:
            msg = f"Process {process.pid} has not completed"
            raise RuntimeError(msg)
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            first_run_time=process.first_run_time,
            completion_time=process.completion_time,
        )

    @property
    def turnaround_time(self) -> int:
        """Return completion minus arrival."""
        return self.completion_time - self.arrival_time

    @property
    def waiting_time(self) -> int:
        """Return turnaround minus burst."""
        return self.turnaround_time - self.burst_time

    @property
    def response_time(self) -> int:
        """Return first run minus arrival."""
        return self.first_run_time - self.arrival_time

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly representation including derived figures."""
        return {
            "pid": self.pid,
            "arrival_time": self.arrival_time,
            "burst_time": self.burst_time,
            "first_run_time": self.first_run_time,
            "completion_time": self.completion_time,
            "turnaround_time": self.turnaround_time,
            "waiting_time": self.waiting_time,
            "response_time": self.response_time,
        }


def _mean(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


@dataclass(frozen=True)
class SimulationMetrics:
    """Aggregate figures for a whole run."""

    processes: tuple[ProcessMetrics, ...]
    makespan: int
    context_switches: int = 0
    demotions: int = 0
    priority_resets: int = 0
    idle_ticks: int = 0

    @property
    def completed(self) -> int:
        """Return the number of completed processes."""
        return len(self.processes)

    @property
    def avg_turnaround_time(self) -> float:
        """Return the mean turnaround time (0.0 if nothing completed)."""
        return _mean([p.turnaround_time for p in self.processes])

    @property
    def avg_waiting_time(self) -> float:
        """Return the mean waiting time (0.0 if nothing completed)."""
        return _mean([p.waiting_time for p in self.processes])

    @property
    def avg_response_time(self) -> float:
        """Return the mean response time (0.0 if nothing completed)."""
        return _mean([p.response_time for p in self.processes])

    @property
    def throughput(self) -> float:
        """Return completed processes per time unit over the makespan."""
        return self.completed / self.makespan if self.makespan > 0 else 0.0

    def for_pid(self, pid: int) -> ProcessMetrics:
        """Return the metrics of process *pid*.

        Raises:
            KeyError: If *pid* has not completed.

        """
        for entry in self.processes:
            if entry.pid == pid:
                return entry
        raise KeyError(pid)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "completed": self.completed,
            "makespan": self.makespan,
            "context_switches": self.context_switches,
            "demotions": self.demotions,
            "priority_resets": self.priority_resets,
            "idle_ticks": self.idle_ticks,
            "avg_turnaround_time": self.avg_turnaround_time,
            "avg_waiting_time": self.avg_waiting_time,
            "avg_response_time": self.avg_response_time,
            "throughput": self.throughput,
            "processes": [p.to_dict() for p in self.processes],
        }
