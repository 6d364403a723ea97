"""Absolute-deadline scheduler checked once per tick."""
from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable

_Callback = Callable[[int], None]


@dataclass(order=True)
class ScheduledEntry:
    deadline_ms: int
    seq: int
    key: str = field(compare=False)
    callback: _Callback = field(compare=False, repr=False)


class DeadlineScheduler:
    """Keyed one-shot callbacks that fire on the first tick at or after their deadline.

    Scheduling a key that is already pending replaces it. Cancelling just
    removes the entry: the callback never runs.
    """

    def __init__(self) -> None:
        self._heap: list[ScheduledEntry] = []
        self._entries: dict[str, ScheduledEntry] = {}
        self._seq = 0

    def schedule(self, key: str, deadline_ms: int, callback: _Callback) -> None:
        self._seq += 1
        entry = ScheduledEntry(deadline_ms=deadline_ms, seq=self._seq, key=key, callback=callback)
        self._entries[key] = entry
        heapq.heappush(self._heap, entry)

    def cancel(self, key: str) -> bool:
        """Drop a pending entry. Returns True if one was pending."""
        return self._entries.pop(key, None) is not None

    def pending(self, key: str) -> bool:
        return key in self._entries

    def deadline(self, key: str) -> int | None:
        entry = self._entries.get(key)
        return entry.deadline_ms if entry else None

    def run_due(self, now_ms: int) -> int:
        """Run every entry whose deadline has passed, earliest first.

        Entries are removed before their callback runs, so a callback may
        reschedule its own key.
        """
        ran = 0
        while self._heap and self._heap[0].deadline_ms <= now_ms:
            entry = heapq.heappop(self._heap)
            # Stale heap rows left behind by cancel() or a reschedule
            if self._entries.get(entry.key) is not entry:
                continue
            del self._entries[entry.key]
            entry.callback(now_ms)
            ran += 1
        return ran

    def clear(self) -> None:
        self._heap.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
