"""MLFQ simulator — a discrete-time multi-level feedback queue scheduler.

Re-exports public symbols so callers can write::

    from mlfq_sim import MLFQConfig, Simulator, ProcessSpec
"""

from mlfq_sim.config import (
    DEFAULT_RESET_PERIOD,
    PRESETS,
    InvalidConfigurationError,
    LevelConfig,
    MLFQConfig,
    ResetMode,
)
from mlfq_sim.console import ConsolePrinter
from mlfq_sim.events import (
    EventRecorder,
    Observer,
    PriorityReset,
    ProcessArrived,
    ProcessCompleted,
    ProcessDemoted,
    ProcessRunning,
    QueuedProcess,
    QueueSnapshot,
    SimulationEvent,
)
from mlfq_sim.logging import LogEntry, Logger, LogLevel
from mlfq_sim.metrics import ProcessMetrics, SimulationMetrics
from mlfq_sim.policy import MLFQPolicy, Outcome
from mlfq_sim.process import TOP_LEVEL, InvalidProcessSpecError, Process, ProcessState
from mlfq_sim.queues import QueueSet
from mlfq_sim.simulator import SimulationResult, Simulator, SimulatorState
from mlfq_sim.workload import DEFAULT_PROCESSES, ProcessSpec, Workload, load_workload

__all__ = [
    "DEFAULT_PROCESSES",
    "DEFAULT_RESET_PERIOD",
    "PRESETS",
    "TOP_LEVEL",
    "ConsolePrinter",
    "EventRecorder",
    "InvalidConfigurationError",
    "InvalidProcessSpecError",
    "LevelConfig",
    "LogEntry",
    "LogLevel",
    "Logger",
    "MLFQConfig",
    "MLFQPolicy",
    "Observer",
    "Outcome",
    "PriorityReset",
    "Process",
    "ProcessArrived",
    "ProcessCompleted",
    "ProcessDemoted",
    "ProcessMetrics",
    "ProcessRunning",
    "ProcessSpec",
    "ProcessState",
    "QueueSet",
    "QueueSnapshot",
    "QueuedProcess",
    "ResetMode",
    "SimulationEvent",
    "SimulationMetrics",
    "SimulationResult",
    "Simulator",
    "SimulatorState",
    "Workload",
    "load_workload",
]
