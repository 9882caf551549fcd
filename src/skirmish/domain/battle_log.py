"""Bounded narrative log shared by the runners and the outcome finalizer."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime

from skirmish.domain.enums import LogType

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 2000


@dataclass(frozen=True, slots=True)
class LogEntry:
    """Single human-readable line of battle narrative."""

    message: str
    type: LogType = LogType.INFO
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class BattleLog:
    """Append-only event stream with a fixed retention size.

    The oldest entries are evicted once ``max_entries`` is reached; the number
    of evicted entries is tracked in ``dropped``.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)
        self.dropped = 0

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, message: str, type: LogType = LogType.INFO) -> LogEntry:
        entry = LogEntry(message=message, type=type)
        if len(self._entries) == self._entries.maxlen:
            self.dropped += 1
        self._entries.append(entry)
        logger.debug("[%s] %s", entry.type, message)
        return entry

    def section(self, title: str) -> LogEntry:
        return self.add(title, LogType.SECTION)

    def entries(self, type: LogType | None = None) -> list[LogEntry]:
        if type is None:
            return list(self._entries)
        return [entry for entry in self._entries if entry.type == type]

    def drain(self) -> list[LogEntry]:
        """Return every retained entry and clear the log."""

        drained = list(self._entries)
        self._entries.clear()
        return drained

    def clear(self) -> None:
        self._entries.clear()
        self.dropped = 0
