from datetime import date, datetime

import pytest

from src.rfid_dtr.rfid_dtr.attendance.model import UNSET, RecordedAt, RecordKey, ScanResult, TimeRecord
from src.rfid_dtr.rfid_dtr.common.datetime_utils import coerce_datetime, parse_clock
from src.rfid_dtr.rfid_dtr.core.enums import AttendanceAction

DAY = date(2026, 2, 2)


def test_with_slot_returns_new_record():
    record = TimeRecord.empty(RecordKey("u_1", DAY), "Alice")
    at = datetime(2026, 2, 2, 8, 15)

    updated = record.with_slot("time_in_am", at)

    assert record.is_blank
    assert not updated.is_blank
    assert updated.time_in_am == RecordedAt(at)
    assert updated.created_at == at
    assert updated.updated_at == at


def test_with_slot_refuses_to_overwrite():
    at = datetime(2026, 2, 2, 8, 15)
    record = TimeRecord.empty(RecordKey("u_1", DAY), "Alice").with_slot("time_in_am", at)

    with pytest.raises(ValueError):
        record.with_slot("time_in_am", at.replace(minute=30))


def test_unknown_slot_name():
    with pytest.raises(KeyError):
        TimeRecord.empty(RecordKey("u_1", DAY), "Alice").slot("lunch")


def test_keys_with_underscores_stay_distinct():
    # "a_b" on 2026-02-02 and "a" on "b_2026-02-02" would collide as joined strings.
    first = RecordKey("a_b", DAY)
    second = RecordKey("a", DAY)

    assert first != second
    assert first.document_id == "a_b_2026-02-02"
    assert len({first, second}) == 2


def test_unset_and_recorded_display():
    assert UNSET.display() == "-"
    assert UNSET.display(None) is None
    assert RecordedAt(datetime(2026, 2, 2, 13, 5)).display() == "01:05 PM"


def test_scan_result_to_dict_omits_empty_fields():
    assert ScanResult.failure("Nope").to_dict() == {"success": False, "message": "Nope"}

    ok = ScanResult(
        success=True,
        message="Welcome Alice! Time In AM recorded at 08:15 AM",
        action=AttendanceAction.TIME_IN_AM,
        time="08:15 AM",
        user_name="Alice",
    )
    assert ok.to_dict() == {
        "success": True,
        "message": "Welcome Alice! Time In AM recorded at 08:15 AM",
        "action": "Time In AM",
        "time": "08:15 AM",
        "userName": "Alice",
    }


@pytest.mark.parametrize(
    "value, expected",
    [
        ("08:15 AM", datetime(2026, 2, 2, 8, 15)),
        ("12:00 AM", datetime(2026, 2, 2, 0, 0)),
        ("12:30 PM", datetime(2026, 2, 2, 12, 30)),
        ("2026-02-02T17:05:44", datetime(2026, 2, 2, 17, 5)),
        (datetime(2026, 2, 2, 9, 1, 59), datetime(2026, 2, 2, 9, 1)),
        ("13:00 PM", None),
        ("yesterday", None),
        ("", None),
        (None, None),
        (42, None),
    ],
)
def test_coerce_datetime(value, expected):
    assert coerce_datetime(DAY, value) == expected


def test_parse_clock_rejects_garbage():
    assert parse_clock("8:75 AM") is None
    assert parse_clock("08:15") is None
