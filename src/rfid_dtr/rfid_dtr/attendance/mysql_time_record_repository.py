from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import coerce_datetime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_bool, db_cursor, fetchall, fetchone
from .model import SLOT_FIELDS, RecordKey, TimeRecord, slot_of
from .repository import TimeRecordRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    user_id, user_name, work_date,
    time_in_am, time_out_am, time_in_pm, time_out_pm,
    missed_am, missed_pm, created_at, updated_at
"""


class MySQLTimeRecordRepository(TimeRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: RecordKey) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE user_id=%s AND work_date=%s
                """,
                (key.user_id, key.work_date),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def write(self, record: TimeRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(
                    user_id, user_name, work_date,
                    time_in_am, time_out_am, time_in_pm, time_out_pm,
                    missed_am, missed_pm, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    user_name=VALUES(user_name),
                    time_in_am=VALUES(time_in_am),
                    time_out_am=VALUES(time_out_am),
                    time_in_pm=VALUES(time_in_pm),
                    time_out_pm=VALUES(time_out_pm),
                    missed_am=VALUES(missed_am),
                    missed_pm=VALUES(missed_pm),
                    updated_at=VALUES(updated_at)
                """,
                (
                    record.user_id,
                    record.user_name,
                    record.work_date,
                    record.time_in_am.at,
                    record.time_out_am.at,
                    record.time_in_pm.at,
                    record.time_out_pm.at,
                    record.missed_am,
                    record.missed_pm,
                    record.created_at,
                    record.updated_at,
                ),
            )

    def read_all(self) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                ORDER BY work_date ASC, user_name ASC
                """
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def read_between(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[TimeRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(str(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_records
                WHERE {where}
                ORDER BY work_date ASC, user_name ASC
                """,
                tuple(params),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def delete(self, key: RecordKey) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM time_records WHERE user_id=%s AND work_date=%s",
                (key.user_id, key.work_date),
            )
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_records")
            return int(cur.rowcount or 0)

    @staticmethod
    def _to_record(r: dict[str, Any]) -> TimeRecord:
        work_date = r["work_date"]
        slots = {}
        for name in SLOT_FIELDS:
            raw = r.get(name)
            value = coerce_datetime(work_date, raw)
            if raw is not None and value is None:
                logger.warning("Ignoring malformed %s=%r for %s on %s", name, raw, r["user_id"], work_date)
            slots[name] = slot_of(value)

        return TimeRecord(
            user_id=str(r["user_id"]),
            user_name=r.get("user_name") or "",
            work_date=work_date,
            missed_am=as_optional_bool(r.get("missed_am")),
            missed_pm=as_optional_bool(r.get("missed_pm")),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
            **slots,
        )
