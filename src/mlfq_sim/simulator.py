"""Simulation clock and driver — the discrete-time MLFQ loop.

One call to :meth:`Simulator.step` is one driver iteration:

1. **Admit** every pending process whose arrival time has been reached,
   in ``(arrival_time, pid)`` order, into the top queue.
2. **Select** the head of the highest non-empty queue.  With nothing
   ready but arrivals still pending, the clock moves one unit (an idle
   tick).  With nothing ready and nothing pending, the run is over.
3. **Run** the process for one slice and move the clock by the slice
   length — not by one unit.
4. **Route** it: completed processes leave, everything else is appended
   to the queue for its (possibly new) level.
5. **Reset** priorities if the policy says a reset is due.  The check
   also follows every idle tick, so a period boundary reached while the
   CPU is idle is not carried over to the next slice.

State machine::

    IDLE → ADMITTING → SELECTING → RUNNING → POSTPROCESSING → ADMITTING
                            ↓
                        TERMINAL

Every simulator owns its own queues, clock and process records, so any
number of them can run side by side without sharing state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, NoReturn

from mlfq_sim.config import MLFQConfig
from mlfq_sim.events import (
    PriorityReset,
    ProcessArrived,
    ProcessCompleted,
    ProcessDemoted,
    ProcessRunning,
    QueuedProcess,
    QueueSnapshot,
)
from mlfq_sim.logging import Logger, LogLevel
from mlfq_sim.metrics import ProcessMetrics, SimulationMetrics
from mlfq_sim.policy import MLFQPolicy, Outcome
from mlfq_sim.process import TOP_LEVEL, Process, ProcessState
from mlfq_sim.queues import QueueSet
from mlfq_sim.workload import validate_specs

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mlfq_sim.events import Observer, SimulationEvent
    from mlfq_sim.workload import ProcessSpec, Workload

_LOG_SOURCE = "driver"


class SimulatorState(StrEnum):
    """Phases of the driver loop."""

    IDLE = "idle"
    ADMITTING = "admitting"
    SELECTING = "selecting"
    RUNNING = "running"
    POSTPROCESSING = "postprocessing"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class SimulationResult:
    """Final state of a finished (or partially run) simulation."""

    final_time: int
    completed: tuple[Process, ...]
    metrics: SimulationMetrics

    @property
    def completion_order(self) -> list[int]:
        """Return completed pids in completion order."""
        return [process.pid for process in self.completed]


class Simulator:
    """Drive an MLFQ schedule over a fixed set of processes."""

    def __init__(
        self,
        specs: Iterable[ProcessSpec],
        *,
        config: MLFQConfig | None = None,
        observers: Iterable[Observer] = (),
        logger: Logger | None = None,
    ) -> None:
        """Validate the input and build the initial simulation state.

        Args:
            specs: The processes to simulate; pids must be unique.
            config: Scheduler configuration (defaults to the classic setup).
            observers: Receivers for simulation events.
            logger: Log buffer to write to (a private one if omitted).

        Raises:
            InvalidProcessSpecError: If any spec is invalid.

        """
        checked = validate_specs(specs)
        self._config = config if config is not None else MLFQConfig.default()
        self._policy = MLFQPolicy(self._config)
        self._queues = QueueSet(num_levels=self._config.num_levels)
        self._observers: list[Observer] = list(observers)
        self._logger = logger if logger is not None else Logger()

        ordered = sorted(checked, key=lambda s: (s.arrival_time, s.pid))
        self._processes: dict[int, Process] = {}
        self._pending: deque[Process] = deque()
        for spec in ordered:
            process = Process.create(spec.pid, spec.arrival_time, spec.burst_time)
            self._processes[spec.pid] = process
            self._pending.append(process)

        self._total_burst = sum(spec.burst_time for spec in checked)
        self._time = 0
        self._state = SimulatorState.IDLE
        self._running: Process | None = None
        self._completed: list[Process] = []
        self._cpu_time_delivered = 0
        self._last_reset = 0
        self._context_switches = 0
        self._demotions = 0
        self._priority_resets = 0
        self._idle_ticks = 0
        self._log(LogLevel.INFO, f"Simulation created with {len(checked)} processes")

    @classmethod
    def from_workload(
        cls,
        workload: Workload,
        *,
        observers: Iterable[Observer] = (),
        logger: Logger | None = None,
    ) -> Simulator:
        """Create a simulator for *workload* and its configuration."""
        return cls(workload.processes, config=workload.config, observers=observers, logger=logger)

    # -- Read-only state --------------------------------------------------

    @property
    def config(self) -> MLFQConfig:
        """Return the scheduler configuration."""
        return self._config

    @property
    def policy(self) -> MLFQPolicy:
        """Return the scheduling policy."""
        return self._policy

    @property
    def queues(self) -> QueueSet:
        """Return the queue set (for inspection)."""
        return self._queues

    @property
    def logger(self) -> Logger:
        """Return the simulation log."""
        return self._logger

    @property
    def current_time(self) -> int:
        """Return the simulated clock."""
        return self._time

    @property
    def state(self) -> SimulatorState:
        """Return the driver state."""
        return self._state

    @property
    def running(self) -> Process | None:
        """Return the process holding the CPU, or None between slices."""
        return self._running

    @property
    def pending(self) -> tuple[Process, ...]:
        """Return processes that have not arrived yet, in admission order."""
        return tuple(self._pending)

    @property
    def completed(self) -> tuple[Process, ...]:
        """Return completed processes in completion order."""
        return tuple(self._completed)

    @property
    def live_processes(self) -> list[Process]:
        """Return every process that has not completed yet."""
        return [p for p in self._processes.values() if p.state is not ProcessState.TERMINATED]

    @property
    def cpu_time_delivered(self) -> int:
        """Return the total CPU time handed out so far."""
        return self._cpu_time_delivered

    @property
    def total_burst(self) -> int:
        """Return the sum of all original burst times."""
        return self._total_burst

    @property
    def is_finished(self) -> bool:
        """Return True once the simulation has reached TERMINAL."""
        return self._state is SimulatorState.TERMINAL

    def process(self, pid: int) -> Process:
        """Return the record for *pid*.

        Raises:
            KeyError: If no process has that pid.

        """
        return self._processes[pid]

    def add_observer(self, observer: Observer) -> None:
        """Register another event receiver."""
        self._observers.append(observer)

    # -- Driver loop ------------------------------------------------------

    def step(self) -> bool:
        """Run one driver iteration.

        Returns:
            False once the simulation has reached TERMINAL, True otherwise.

        Raises:
            RuntimeError: If the simulation already terminated, or an
                internal invariant is broken.

        """
        if self._state is SimulatorState.TERMINAL:
            msg = "Simulation has already terminated"
            raise RuntimeError(msg)

        self._state = SimulatorState.ADMITTING
        self._admit()

        self._state = SimulatorState.SELECTING
        if self._queues.is_empty():
            if not self._pending:
                self._terminate()
                return False
            self._idle_tick()
            return True

        self._emit(self._snapshot())
        process = self._queues.dequeue_highest_ready()
        if process is None:
            self._fail("Queue set reported ready work but yielded no process")

        self._state = SimulatorState.RUNNING
        self._running = process
        process.dispatch()
        level = process.current_level
        length = self._policy.execution_slice(process, level)
        self._emit(ProcessRunning(pid=process.pid, level=level, time=self._time, duration=length))
        self._log(
            LogLevel.DEBUG,
            f"Running process {process.pid} from level {level} for {length} units",
        )
        outcome = self._policy.apply_execution(process, level, length, now=self._time)
        self._time += length
        self._cpu_time_delivered += length
        self._context_switches += 1

        self._state = SimulatorState.POSTPROCESSING
        self._route(process, level, outcome)
        self._running = None
        self._maybe_reset()

        self._state = SimulatorState.ADMITTING
        return True

    def run(self) -> SimulationResult:
        """Step until TERMINAL and return the result."""
        while self._state is not SimulatorState.TERMINAL and self.step():
            pass
        return self.result()

    def result(self) -> SimulationResult:
        """Return the result so far (final once the simulation is finished)."""
        metrics = SimulationMetrics(
            processes=tuple(ProcessMetrics.from_process(p) for p in self._completed),
            makespan=self._time,
            context_switches=self._context_switches,
            demotions=self._demotions,
            priority_resets=self._priority_resets,
            idle_ticks=self._idle_ticks,
        )
        return SimulationResult(
            final_time=self._time,
            completed=tuple(self._completed),
            metrics=metrics,
        )

    # -- Invariant checks -------------------------------------------------

    def check_invariants(self) -> None:
        """Verify the scheduler's bookkeeping.

        Raises:
            RuntimeError: Describing the first violated invariant.

        """
        remaining = sum(p.remaining_time for p in self.live_processes)
        if remaining + self._cpu_time_delivered != self._total_burst:
            self._fail(
                f"Work not conserved: {remaining} remaining + "
                f"{self._cpu_time_delivered} delivered != {self._total_burst}"
            )
        seen: set[int] = set()
        for level, queue in enumerate(self._queues.snapshot()):
            for process in queue:
                if process.pid in seen:
                    self._fail(f"Process {process.pid} is queued more than once")
                seen.add(process.pid)
                if process is self._running or process.state is not ProcessState.READY:
                    self._fail(f"Process {process.pid} is queued while {process.state}")
                if process.current_level != level:
                    self._fail(
                        f"Process {process.pid} at level {process.current_level} "
                        f"sits in queue {level}"
                    )
                if process.remaining_time == 0:
                    self._fail(f"Completed process {process.pid} is still queued")
                allotment = self._policy.allotment(level)
                if allotment is not None and process.time_in_level > allotment:
                    self._fail(
                        f"Process {process.pid} exceeded allotment at level {level} "
                        f"({process.time_in_level}/{allotment})"
                    )

    # -- Internals --------------------------------------------------------

    def _admit(self) -> None:
        while self._pending and self._pending[0].arrival_time <= self._time:
            process = self._pending.popleft()
            process.admit()
            self._queues.enqueue(TOP_LEVEL, process)
            self._emit(ProcessArrived(pid=process.pid, time=self._time))
            self._log(LogLevel.INFO, f"Process {process.pid} arrives")

    def _idle_tick(self) -> None:
        self._time += 1
        self._idle_ticks += 1
        self._maybe_reset()
        admitted_any = len(self._pending) < len(self._processes)
        self._state = SimulatorState.ADMITTING if admitted_any else SimulatorState.IDLE

    def _route(self, process: Process, level: int, outcome: Outcome) -> None:
        if outcome is Outcome.COMPLETED:
            process.terminate(now=self._time)
            self._completed.append(process)
            self._emit(ProcessCompleted(pid=process.pid, time=self._time))
            self._log(LogLevel.INFO, f"Process {process.pid} completed")
            return

        process.preempt()
        self._queues.enqueue(process.current_level, process)
        if outcome is Outcome.DEMOTED:
            self._demotions += 1
            self._emit(
                ProcessDemoted(
                    pid=process.pid,
                    from_level=level,
                    to_level=process.current_level,
                    time=self._time,
                )
            )
            self._log(
                LogLevel.INFO,
                f"Process {process.pid} demoted from level {level} to {process.current_level}",
            )

    def _maybe_reset(self) -> None:
        if not self._policy.is_reset_due(self._time, last_reset=self._last_reset):
            return
        promoted = self._policy.priority_reset(self._queues)
        self._last_reset = self._time
        self._priority_resets += 1
        pids = tuple(p.pid for p in promoted)
        self._emit(PriorityReset(time=self._time, promoted=pids))
        self._log(LogLevel.INFO, f"Priority reset promoted {list(pids)}")

    def _terminate(self) -> None:
        self._state = SimulatorState.TERMINAL
        count = len(self._completed)
        self._log(LogLevel.INFO, f"Simulation finished: {count} processes completed")

    def _snapshot(self) -> QueueSnapshot:
        levels = tuple(
            tuple(QueuedProcess(pid=p.pid, remaining_time=p.remaining_time) for p in queue)
            for queue in self._queues.snapshot()
        )
        return QueueSnapshot(time=self._time, levels=levels)

    def _emit(self, event: SimulationEvent) -> None:
        for observer in self._observers:
            observer.notify(event)

    def _log(self, level: LogLevel, message: str) -> None:
        self._logger.log(level, message, source=_LOG_SOURCE, time=self._time)

    def _fail(self, message: str) -> NoReturn:
        self._logger.log(LogLevel.ERROR, message, source=_LOG_SOURCE, time=self._time)
        raise RuntimeError(message)
