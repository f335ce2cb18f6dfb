from __future__ import annotations

from enum import Enum


class AttendanceAction(str, Enum):
    """Thao tác chấm công mà kiosk gửi lên (giá trị hiển thị dùng làm khoá)."""

    TIME_IN_AM = "Time In AM"
    TIME_OUT_AM = "Time Out AM"
    TIME_IN_PM = "Time In PM"
    TIME_OUT_PM = "Time Out PM"

    @classmethod
    def parse(cls, value: str) -> "AttendanceAction":
        """Accept either the display value or the member name (e.g. TIME_IN_AM)."""
        if not isinstance(value, str):
            raise ValueError(f"Unknown attendance action: {value!r}")
        raw = value.strip()
        for member in cls:
            if raw in {member.value, member.name}:
                return member
        raise ValueError(f"Unknown attendance action: {value!r}")


class DaySession(str, Enum):
    """Buổi làm việc trong ngày."""

    AM = "AM"
    PM = "PM"
