from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import TimeRecordRepository
from ..common.datetime_utils import parse_month_key
from ..core.constants import EXPORT_DATE_FORMAT, ISO_DATE_FORMAT, MONTH_KEY_FORMAT, MONTH_LABEL_FORMAT
from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .calculator.base import HoursCalculator
from .calculator.session_calculator import SessionHoursCalculator


@dataclass(frozen=True)
class ReportData:
    title: str
    rows: list[dict]
    summary: list[dict]


def _fmt_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _matches(row: AttendanceReportRow, needle: str) -> bool:
    # Name or date, in either the export or the ISO form.
    haystack = (
        (row.user_name or "").casefold(),
        row.work_date.strftime(EXPORT_DATE_FORMAT),
        row.work_date.strftime(ISO_DATE_FORMAT),
    )
    return any(needle in h for h in haystack)


def month_bounds(month_key: str) -> tuple[date, date]:
    try:
        first = parse_month_key((month_key or "").strip())
    except ValueError:
        raise ValidationError("Month must be in YYYY-MM format")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


class ReportService:
    """Read side for the admin dashboard and exports.

    Always reads from the store, never from the engine's cache.
    """

    def __init__(
        self,
        records: TimeRecordRepository,
        users: Optional[UserRepository] = None,
        *,
        calculator: Optional[HoursCalculator] = None,
    ):
        self._records = records
        self._users = users
        self._calculator = calculator or SessionHoursCalculator()

    def build_month_report(
        self,
        month_key: str,
        *,
        user_id: Optional[str] = None,
        query: Optional[str] = None,
    ) -> ReportData:
        start, end = month_bounds(month_key)
        return self.build_report(
            start=start,
            end=end,
            user_id=user_id,
            query=query,
            title=start.strftime(MONTH_KEY_FORMAT),
        )

    def available_months(self) -> list[dict]:
        """Distinct months that have records, newest first (value yyyy-MM, label 'February 2026')."""

        months = {r.work_date.replace(day=1) for r in self._records.read_all()}
        return [
            {"value": m.strftime(MONTH_KEY_FORMAT), "label": m.strftime(MONTH_LABEL_FORMAT)}
            for m in sorted(months, reverse=True)
        ]

    def build_report(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[str] = None,
        query: Optional[str] = None,
        title: Optional[str] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        records = self._records.read_between(start_date=start, end_date=end, user_id=user_id)
        departments = self._departments()
        query_rows = [AttendanceReportRow.from_record(r, department=departments.get(r.user_id)) for r in records]
        if query and query.strip():
            query_rows = [r for r in query_rows if _matches(r, query.strip().casefold())]
        query_rows.sort(key=lambda r: (r.work_date, (r.user_name or "").casefold()))

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = self._calculator.worked_minutes(r)

            out_rows.append(
                {
                    "user_id": r.user_id,
                    "name": r.user_name,
                    "department": r.department or "-",
                    "work_date": r.work_date.strftime(ISO_DATE_FORMAT),
                    "date": r.work_date.strftime(EXPORT_DATE_FORMAT),
                    "time_in_am": r.time_in_am.display(),
                    "time_out_am": r.time_out_am.display(),
                    "time_in_pm": r.time_in_pm.display(),
                    "time_out_pm": r.time_out_pm.display(),
                    "missed_am": bool(r.missed_am),
                    "missed_pm": bool(r.missed_pm),
                    "worked_hours": _fmt_minutes(minutes),
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {"user_id": r.user_id, "name": r.user_name, "days": 0, "total_minutes": 0}
                summary_map[r.user_id] = s
            s["days"] += 1
            s["total_minutes"] += minutes

        ranked = sorted(summary_map.values(), key=lambda x: x["total_minutes"], reverse=True)
        summary = [
            {
                "user_id": s["user_id"],
                "name": s["name"],
                "days": s["days"],
                "total_hours": _fmt_minutes(int(s["total_minutes"])),
            }
            for s in ranked
        ]
        return ReportData(
            title=title or f"{start.strftime(ISO_DATE_FORMAT)} - {end.strftime(ISO_DATE_FORMAT)}",
            rows=out_rows,
            summary=summary,
        )

    def _departments(self) -> dict[str, Optional[str]]:
        if not self._users:
            return {}
        return {u.user_id: u.department for u in self._users.list_all()}

