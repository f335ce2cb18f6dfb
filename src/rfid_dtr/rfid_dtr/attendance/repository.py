from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import RecordKey, TimeRecord


class TimeRecordRepository(Protocol):
    """Store adapter for daily time records.

    Implementations raise StoreError when the backing database fails.
    """

    def get(self, key: RecordKey) -> Optional[TimeRecord]:
        raise NotImplementedError

    def write(self, record: TimeRecord) -> None:
        """Full overwrite of the row for record.key (created_at is kept)."""

        raise NotImplementedError

    def read_all(self) -> Sequence[TimeRecord]:
        raise NotImplementedError

    def read_between(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[TimeRecord]:
        raise NotImplementedError

    def delete(self, key: RecordKey) -> bool:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
