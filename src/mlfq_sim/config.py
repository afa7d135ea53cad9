"""Scheduler configuration — levels, quanta, allotments and reset timing.

Each priority level has two knobs:

- **quantum** — the longest contiguous run a process gets once selected.
- **allotment** — the total CPU a process may use at that level before it
  is demoted.  ``None`` means unbounded: the process is never demoted
  from that level by allotment exhaustion.

Levels are listed top (highest priority) first.  A configuration is
immutable once built and is validated on construction, so an invalid
one never reaches the scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

DEFAULT_RESET_PERIOD = 50
PRESETS = ("default", "bounded-top")


class InvalidConfigurationError(ValueError):
    """Raise when a scheduler configuration or workload file is unusable."""


class ResetMode(StrEnum):
    """When the periodic priority reset fires.

    - EXACT: only when the clock lands exactly on a positive multiple of
      the reset period after a slice.  A slice that jumps over the
      boundary skips that reset.
    - CROSSING: at the first post-slice instant at or beyond each
      multiple of the period, so no reset is ever skipped.
    """

    EXACT = "exact"
    CROSSING = "crossing"


@dataclass(frozen=True)
class LevelConfig:
    """Quantum and allotment for a single priority level."""

    quantum: int
    allotment: int | None = None

    def __post_init__(self) -> None:
        """Reject non-positive quanta and allotments."""
        if isinstance(self.quantum, bool) or not isinstance(self.quantum, int):
            msg = f"Quantum must be an integer, got {self.quantum!r}"
            raise InvalidConfigurationError(msg)
        if self.quantum <= 0:
            msg = f"Quantum must be positive, got {self.quantum}"
            raise InvalidConfigurationError(msg)
        if self.allotment is not None:
            if isinstance(self.allotment, bool) or not isinstance(self.allotment, int):
                msg = f"Allotment must be an integer or None, got {self.allotment!r}"
                raise InvalidConfigurationError(msg)
            if self.allotment <= 0:
                msg = f"Allotment must be positive, got {self.allotment}"
                raise InvalidConfigurationError(msg)

    @property
    def unbounded(self) -> bool:
        """Return True if processes are never demoted from this level."""
        return self.allotment is None

    def to_dict(self) -> dict[str, int | None]:
        """Return a JSON-friendly representation."""
        return {"quantum": self.quantum, "allotment": self.allotment}


@dataclass(frozen=True)
class MLFQConfig:
    """Complete, validated configuration for one simulation."""

    levels: tuple[LevelConfig, ...]
    reset_period: int = DEFAULT_RESET_PERIOD
    reset_mode: ResetMode = ResetMode.EXACT

    def __post_init__(self) -> None:
        """Validate the level list and the reset period."""
        if not self.levels:
            msg = "At least one priority level is required"
            raise InvalidConfigurationError(msg)
        # Accept any sequence but store a tuple so the config stays hashable.
        object.__setattr__(self, "levels", tuple(self.levels))
        if isinstance(self.reset_period, bool) or not isinstance(self.reset_period, int):
            msg = f"Reset period must be an integer, got {self.reset_period!r}"
            raise InvalidConfigurationError(msg)
        if self.reset_period <= 0:
            msg = f"Reset period must be positive, got {self.reset_period}"
            raise InvalidConfigurationError(msg)
        try:
            object.__setattr__(self, "reset_mode", ResetMode(self.reset_mode))
        except ValueError as e:
            msg = f"Unknown reset mode {self.reset_mode!r}"
            raise InvalidConfigurationError(msg) from e

    @classmethod
    def default(cls) -> MLFQConfig:
        """Return the three-level setup with an unbounded top queue.

        Short quantum at the top, longer ones further down.  Because the
        top queue has no allotment, work admitted there never leaves it;
        see :meth:`bounded_top` for a setup that demotes.
        """
        return cls(
            levels=(
                LevelConfig(quantum=4),
                LevelConfig(quantum=8, allotment=20),
                LevelConfig(quantum=16, allotment=10),
            ),
            reset_period=DEFAULT_RESET_PERIOD,
        )

    @classmethod
    def bounded_top(cls) -> MLFQConfig:
        """Return the three-level setup where processes sink to the bottom.

        The top queue allows 10 units before demotion and the middle one
        20; the bottom queue is unbounded.  CPU-bound work therefore
        drifts downwards until a priority reset lifts it back up.
        """
        return cls(
            levels=(
                LevelConfig(quantum=4, allotment=10),
                LevelConfig(quantum=8, allotment=20),
                LevelConfig(quantum=16),
            ),
            reset_period=DEFAULT_RESET_PERIOD,
        )

    @classmethod
    def preset(cls, name: str) -> MLFQConfig:
        """Return the built-in configuration called *name*.

        Raises:
            InvalidConfigurationError: If there is no such preset.

        """
        match name:
            case "default":
                return cls.default()
            case "bounded-top":
                return cls.bounded_top()
        msg = f"Unknown preset {name!r} (expected one of {', '.join(PRESETS)})"
        raise InvalidConfigurationError(msg)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MLFQConfig:
        """Build a configuration from JSON-style data.

        Missing keys fall back to the preset named by ``"preset"``, or to
        :meth:`default` when there is none.

        Raises:
            InvalidConfigurationError: If the data is malformed.

        """
        preset = data.get("preset", "default")
        if not isinstance(preset, str):
            msg = f"'preset' must be a string, got {preset!r}"
            raise InvalidConfigurationError(msg)
        base = cls.preset(preset)
        raw_levels = data.get("levels")
        if raw_levels is None:
            levels = base.levels
        else:
            if not isinstance(raw_levels, list):
                msg = "'levels' must be a list"
                raise InvalidConfigurationError(msg)
            try:
                levels = tuple(
                    LevelConfig(quantum=level["quantum"], allotment=level.get("allotment"))
                    for level in raw_levels
                )
            except (KeyError, TypeError, AttributeError) as e:
                msg = f"Malformed level entry: {e}"
                raise InvalidConfigurationError(msg) from e
        return cls(
            levels=levels,
            reset_period=data.get("reset_period", base.reset_period),
            reset_mode=data.get("reset_mode", base.reset_mode),
        )

    @property
    def num_levels(self) -> int:
        """Return the number of priority levels."""
        return len(self.levels)

    @property
    def bottom_level(self) -> int:
        """Return the index of the lowest-priority level."""
        return len(self.levels) - 1

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "levels": [level.to_dict() for level in self.levels],
            "reset_period": self.reset_period,
            "reset_mode": str(self.reset_mode),
        }
