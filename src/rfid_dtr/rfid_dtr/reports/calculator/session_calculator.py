from __future__ import annotations

from ...attendance.model import AttendanceReportRow, TimeSlot
from .base import HoursCalculator


class SessionHoursCalculator(HoursCalculator):
    """Standard rule: (AM out - AM in) + (PM out - PM in), complete pairs only, not below 0."""

    def worked_minutes(self, row: AttendanceReportRow) -> int:
        return self._pair(row.time_in_am, row.time_out_am) + self._pair(row.time_in_pm, row.time_out_pm)

    @staticmethod
    def _pair(start: TimeSlot, end: TimeSlot) -> int:
        if not start.is_set or not end.is_set:
            return 0
        minutes = int((end.at - start.at).total_seconds() // 60)
        return max(minutes, 0)
