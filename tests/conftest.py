from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.rfid_dtr.rfid_dtr.attendance.cache import RecordCache
from src.rfid_dtr.rfid_dtr.attendance.model import RecordKey, TimeRecord
from src.rfid_dtr.rfid_dtr.attendance.service import AttendanceService
from src.rfid_dtr.rfid_dtr.core.exceptions import StoreError
from src.rfid_dtr.rfid_dtr.users.model import User


class InMemoryUsers:
    def __init__(self, users: Optional[list[User]] = None):
        self._by_id: dict[str, User] = {u.user_id: u for u in (users or [])}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_card_uid(self, card_uid: str) -> Optional[User]:
        for u in self._by_id.values():
            if u.card_uid == card_uid:
                return u
        return None

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: u.name)

    def create_user(self, user: User) -> str:
        self._by_id[user.user_id] = user
        return user.user_id

    def update_user(self, user: User) -> bool:
        if user.user_id not in self._by_id:
            return False
        self._by_id[user.user_id] = user
        return True

    def delete_by_id(self, user_id: str) -> bool:
        return self._by_id.pop(user_id, None) is not None

    def delete_all(self) -> int:
        n = len(self._by_id)
        self._by_id.clear()
        return n


class InMemoryRecords:
    """Store fake; can be told to fail the next N writes."""

    def __init__(self):
        self.rows: dict[RecordKey, TimeRecord] = {}
        self.writes = 0
        self.reads = 0
        self.fail_next_writes = 0

    def get(self, key: RecordKey) -> Optional[TimeRecord]:
        self.reads += 1
        return self.rows.get(key)

    def write(self, record: TimeRecord) -> None:
        if self.fail_next_writes > 0:
            self.fail_next_writes -= 1
            raise StoreError("store unavailable")
        self.writes += 1
        existing = self.rows.get(record.key)
        if existing is not None and existing.created_at is not None:
            record = replace(record, created_at=existing.created_at)
        self.rows[record.key] = record

    def read_all(self):
        return sorted(self.rows.values(), key=lambda r: (r.work_date, r.user_name))

    def read_between(self, *, start_date: date, end_date: date, user_id: Optional[str] = None):
        return [
            r
            for r in self.read_all()
            if start_date <= r.work_date <= end_date and (user_id is None or r.user_id == user_id)
        ]

    def delete(self, key: RecordKey) -> bool:
        return self.rows.pop(key, None) is not None

    def delete_all(self) -> int:
        n = len(self.rows)
        self.rows.clear()
        return n


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 15, 0)


@pytest.fixture
def alice() -> User:
    return User(user_id="u_1", name="Alice", card_uid="CARD-001", department="IT")


@pytest.fixture
def users_repo(alice) -> InMemoryUsers:
    return InMemoryUsers([alice])


@pytest.fixture
def records_repo() -> InMemoryRecords:
    return InMemoryRecords()


@pytest.fixture
def cache() -> RecordCache:
    return RecordCache()


@pytest.fixture
def attendance_service(records_repo, users_repo, cache) -> AttendanceService:
    return AttendanceService(records_repo, users_repo, cache=cache, write_attempts=2)
