"""Driver log — what the simulator did, stamped with the simulated clock.

Observers get events; the log is for people reading a run afterwards.
The driver writes one entry per admission, completion, demotion and
priority reset (INFO), one per dispatched slice (DEBUG), and one before
aborting on a broken invariant (ERROR).

Entries carry the simulated time rather than wall-clock time, so two
runs of the same workload produce identical logs.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How noteworthy an entry is; higher values are more severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One line of the driver log.

    Attributes:
        level: Severity of the entry.
        message: What happened, in words.
        source: Which part of the simulator wrote it (the driver uses
            ``"driver"``).
        time: Simulated clock value at the moment of writing.

    """

    level: LogLevel
    message: str
    source: str
    time: int = 0

    def __str__(self) -> str:
        """Format as ``[t=TIME] [LEVEL] source: message``."""
        return f"[t={self.time}] [{self.level.name}] {self.source}: {self.message}"

    def to_dict(self) -> dict[str, str | int]:
        """Return a JSON-friendly representation."""
        return {
            "level": self.level.name,
            "message": self.message,
            "source": self.source,
            "time": self.time,
        }


class Logger:
    """Collects the entries of one simulation run in the order written."""

    def __init__(self) -> None:
        """Create a logger with no entries."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every entry, oldest first."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        time: int = 0,
    ) -> None:
        """Record *message* at *level*, stamped with simulated *time*."""
        self._entries.append(LogEntry(level=level, message=message, source=source, time=time))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        since: int | None = None,
        until: int | None = None,
    ) -> list[LogEntry]:
        """Select entries by severity, writer and clock window.

        Args:
            min_level: Drop entries below this severity.
            source: Keep only entries written by this source.
            since: Drop entries stamped before this time.
            until: Drop entries stamped after this time.

        Returns:
            A new list; the logger itself is not changed.

        """
        return [
            entry
            for entry in self._entries
            if (min_level is None or entry.level >= min_level)
            and (source is None or entry.source == source)
            and (since is None or entry.time >= since)
            and (until is None or entry.time <= until)
        ]

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of entries."""
        return len(self._entries)
