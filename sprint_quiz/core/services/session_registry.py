"""Bounded in-memory registry for per-visitor server state."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from typing import Generic, TypeVar

from sprint_quiz.utils.time_utils import Clock, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class _Entry(Generic[T]):
    value: T
    last_seen: datetime


class SessionRegistry(Generic[T]):
    """Maps visitor ids to state, evicting idle entries and the least recently used.

    Not thread-safe on its own; ``QuizManager`` calls it with its lock held.
    """

    def __init__(
        self,
        name: str,
        max_entries: int,
        idle_timeout: timedelta,
        clock: Clock = utc_now,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._name = name
        self._max_entries = max_entries
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._entries: OrderedDict[str, _Entry[T]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def add(self, key: str, value: T) -> None:
        self.prune()
        self._entries[key] = _Entry(value=value, last_seen=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.info("Evicted least recently used %s session %s", self._name, evicted)

    def get(self, key: str | None) -> T | None:
        """Return the value for ``key`` and mark it as used; None when unknown or expired."""
        if not key:
            return None
        self.prune()
        entry = self._entries.get(key)
        if entry is None:
            return None
        entry.last_seen = self._clock()
        self._entries.move_to_end(key)
        return entry.value

    def discard(self, key: str | None) -> None:
        if key:
            self._entries.pop(key, None)

    def prune(self) -> int:
        """Drop entries idle for longer than the timeout. Returns how many were dropped."""
        cutoff = self._clock() - self._idle_timeout
        expired = 0
        # Entries are kept in last-use order, so the idle ones sit at the front.
        while self._entries:
            key, entry = next(iter(self._entries.items()))
            if entry.last_seen > cutoff:
                break
            del self._entries[key]
            expired += 1
        if expired:
            logger.info("Expired %d idle %s sessions", expired, self._name)
        return expired
