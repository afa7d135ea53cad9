"""Workload input — the processes to simulate and the config to use.

A workload can come from code (a list of ``ProcessSpec``), from a JSON
file, or from a JSON request body.  File layout::

    {
        "processes": [
            {"pid": 1, "arrival_time": 0, "burst_time": 25},
            ...
        ],
        "levels": [{"quantum": 4, "allotment": null}, ...],
        "reset_period": 50,
        "reset_mode": "exact"
    }

Only ``processes`` is required; the configuration keys fall back to
``MLFQConfig.default()``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mlfq_sim.config import InvalidConfigurationError, MLFQConfig
from mlfq_sim.process import InvalidProcessSpecError, check_times

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


@dataclass(frozen=True)
class ProcessSpec:
    """Input description of one process: ``(pid, arrival_time, burst_time)``."""

    pid: int
    arrival_time: int
    burst_time: int

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly representation."""
        return {"pid": self.pid, "arrival_time": self.arrival_time, "burst_time": self.burst_time}


DEFAULT_PROCESSES: tuple[ProcessSpec, ...] = (
    ProcessSpec(pid=1, arrival_time=0, burst_time=25),
    ProcessSpec(pid=2, arrival_time=2, burst_time=30),
    ProcessSpec(pid=3, arrival_time=5, burst_time=15),
)


@dataclass(frozen=True)
class Workload:
    """A set of process specs together with the configuration to run them under."""

    processes: tuple[ProcessSpec, ...]
    config: MLFQConfig = field(default_factory=MLFQConfig.default)

    @classmethod
    def default(cls) -> Workload:
        """Return the built-in three-process workload."""
        return cls(processes=DEFAULT_PROCESSES)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {"processes": [spec.to_dict() for spec in self.processes], **self.config.to_dict()}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_specs(specs: Iterable[ProcessSpec]) -> tuple[ProcessSpec, ...]:
    """Check that *specs* describe a simulatable set of processes.

    Returns:
        The specs as a tuple, in the order given.

    Raises:
        InvalidProcessSpecError: On a non-integer field, a negative
            arrival or burst time, or a duplicate pid.

    """
    checked = tuple(specs)
    seen: set[int] = set()
    for spec in checked:
        if not all(_is_int(v) for v in (spec.pid, spec.arrival_time, spec.burst_time)):
            msg = f"Process spec fields must be integers: {spec}"
            raise InvalidProcessSpecError(msg)
        check_times(spec.pid, spec.arrival_time, spec.burst_time)
        if spec.pid in seen:
            msg = f"Duplicate process id {spec.pid}"
            raise InvalidProcessSpecError(msg)
        seen.add(spec.pid)
    return checked


def workload_from_dict(data: Any) -> Workload:
    """Build a workload from decoded JSON data.

    Raises:
        InvalidProcessSpecError: If the process list is malformed.
        InvalidConfigurationError: If the configuration is malformed.

    """
    if not isinstance(data, dict):
        msg = "Workload must be a JSON object"
        raise InvalidConfigurationError(msg)
    raw = data.get("processes")
    if not isinstance(raw, list):
        msg = "Workload needs a 'processes' list"
        raise InvalidProcessSpecError(msg)
    try:
        specs = [
            ProcessSpec(
                pid=entry["pid"],
                arrival_time=entry["arrival_time"],
                burst_time=entry["burst_time"],
            )
            for entry in raw
        ]
    except (KeyError, TypeError) as e:
        msg = f"Malformed process entry: {e}"
        raise InvalidProcessSpecError(msg) from e
    return Workload(processes=validate_specs(specs), config=MLFQConfig.from_dict(data))


def load_workload(path: Path) -> Workload:
    """Read a workload from a JSON file.

    Raises:
        InvalidConfigurationError: If the file cannot be read or parsed.
        InvalidProcessSpecError: If the process list is malformed.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load workload: {e}"
        raise InvalidConfigurationError(msg) from e
    return workload_from_dict(data)
