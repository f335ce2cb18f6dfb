from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import format_clock
from ..core.constants import EMPTY_PLACEHOLDER, ISO_DATE_FORMAT
from ..core.enums import AttendanceAction


@dataclass(frozen=True)
class Unset:
    """Slot that has not been recorded yet."""

    @property
    def is_set(self) -> bool:
        return False

    @property
    def at(self) -> Optional[datetime]:
        return None

    def display(self, placeholder: str = EMPTY_PLACEHOLDER) -> str:
        return placeholder


@dataclass(frozen=True)
class RecordedAt:
    """Slot recorded at an absolute date-time (minute precision)."""

    at: datetime

    @property
    def is_set(self) -> bool:
        return True

    def display(self, placeholder: str = EMPTY_PLACEHOLDER) -> str:
        return format_clock(self.at)


UNSET = Unset()

TimeSlot = Union[Unset, RecordedAt]


def slot_of(value: Optional[datetime]) -> TimeSlot:
    return RecordedAt(value) if value is not None else UNSET


@dataclass(frozen=True)
class RecordKey:
    """Composite identity of a daily record: (user_id, work_date)."""

    user_id: str
    work_date: date

    @property
    def document_id(self) -> str:
        # Display/export form only.
        return f"{self.user_id}_{self.work_date.strftime(ISO_DATE_FORMAT)}"


SLOT_FIELDS = ("time_in_am", "time_out_am", "time_in_pm", "time_out_pm")


@dataclass(frozen=True)
class TimeRecord:
    """Thực thể miền (domain): bản ghi chấm công theo ngày của một người dùng.

    Immutable: every accepted action produces a new instance via ``with_slot``.
    """

    user_id: str
    user_name: str
    work_date: date
    time_in_am: TimeSlot = UNSET
    time_out_am: TimeSlot = UNSET
    time_in_pm: TimeSlot = UNSET
    time_out_pm: TimeSlot = UNSET
    missed_am: Optional[bool] = None
    missed_pm: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def empty(cls, key: RecordKey, user_name: str) -> "TimeRecord":
        return cls(user_id=key.user_id, user_name=user_name, work_date=key.work_date)

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.user_id, self.work_date)

    @property
    def is_blank(self) -> bool:
        return not any(self.slot(name).is_set for name in SLOT_FIELDS)

    def slot(self, name: str) -> TimeSlot:
        if name not in SLOT_FIELDS:
            raise KeyError(name)
        return getattr(self, name)

    def with_slot(self, name: str, at: datetime, *, user_name: Optional[str] = None) -> "TimeRecord":
        if self.slot(name).is_set:
            raise ValueError(f"{name} is already recorded for {self.key.document_id}")
        return replace(
            self,
            user_name=user_name or self.user_name,
            created_at=self.created_at or at,
            updated_at=at,
            **{name: RecordedAt(at)},
        )

    def with_missed(self, *, missed_am: Optional[bool], missed_pm: Optional[bool], at: datetime) -> "TimeRecord":
        return replace(self, missed_am=missed_am, missed_pm=missed_pm, updated_at=at)


@dataclass(frozen=True)
class ScanResult:
    """Kết quả trả về cho tầng giao diện sau mỗi lần quét thẻ."""

    success: bool
    message: str
    action: Optional[AttendanceAction] = None
    time: Optional[str] = None
    user_name: Optional[str] = None

    @classmethod
    def failure(cls, message: str, *, user_name: Optional[str] = None) -> "ScanResult":
        return cls(success=False, message=message, user_name=user_name)

    def to_dict(self) -> dict:
        out: dict = {"success": self.success, "message": self.message}
        if self.action is not None:
            out["action"] = self.action.value
        if self.time is not None:
            out["time"] = self.time
        if self.user_name is not None:
            out["userName"] = self.user_name
        return out


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model phục vụ báo cáo/xuất file."""

    user_id: str
    user_name: str
    work_date: date
    time_in_am: TimeSlot = UNSET
    time_out_am: TimeSlot = UNSET
    time_in_pm: TimeSlot = UNSET
    time_out_pm: TimeSlot = UNSET
    missed_am: Optional[bool] = None
    missed_pm: Optional[bool] = None
    department: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_record(cls, record: TimeRecord, *, department: Optional[str] = None) -> "AttendanceReportRow":
        return cls(
            user_id=record.user_id,
            user_name=record.user_name,
            work_date=record.work_date,
            time_in_am=record.time_in_am,
            time_out_am=record.time_out_am,
            time_in_pm=record.time_in_pm,
            time_out_pm=record.time_out_pm,
            missed_am=record.missed_am,
            missed_pm=record.missed_pm,
            department=department,
        )
