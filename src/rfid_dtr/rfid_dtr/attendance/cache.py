from __future__ import annotations

import threading
from typing import Iterator, Optional

from .model import RecordKey, TimeRecord


class RecordCache:
    """Process-wide view of the last known record per composite key.

    Owned by the container and injected into AttendanceService (no module
    singleton). Also hands out one lock per key so that load-guard-write
    sequences for the same user and day never interleave.
    """

    def __init__(self) -> None:
        self._records: dict[RecordKey, TimeRecord] = {}
        self._locks: dict[RecordKey, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: RecordKey) -> Optional[TimeRecord]:
        return self._records.get(key)

    def put(self, record: TimeRecord) -> None:
        self._records[record.key] = record

    def forget(self, key: RecordKey) -> None:
        self._records.pop(key, None)

    def clear(self) -> None:
        with self._guard:
            self._records.clear()
            self._locks.clear()

    def lock_for(self, key: RecordKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __contains__(self, key: RecordKey) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TimeRecord]:
        return iter(list(self._records.values()))
