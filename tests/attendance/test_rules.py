from datetime import date, datetime

import pytest

from src.rfid_dtr.rfid_dtr.attendance.model import RecordKey, TimeRecord
from src.rfid_dtr.rfid_dtr.attendance.rules import ACTION_RULES, rule_for, suggest_action
from src.rfid_dtr.rfid_dtr.core.enums import AttendanceAction, DaySession

DAY = date(2026, 2, 2)


def _record(**slots) -> TimeRecord:
    record = TimeRecord.empty(RecordKey("u_1", DAY), "Alice")
    for name, at in slots.items():
        record = record.with_slot(name, at)
    return record


def test_every_action_has_a_rule():
    assert set(ACTION_RULES) == set(AttendanceAction)
    assert {r.slot for r in ACTION_RULES.values()} == {"time_in_am", "time_out_am", "time_in_pm", "time_out_pm"}


def test_rule_sessions():
    assert rule_for(AttendanceAction.TIME_OUT_AM).session == DaySession.AM
    assert rule_for(AttendanceAction.TIME_IN_PM).session == DaySession.PM


def test_messages_are_formatted_with_name_and_time():
    rule = rule_for(AttendanceAction.TIME_OUT_PM)

    assert rule.success_for("Bob", "05:02 PM") == "Goodbye Bob! Time Out PM recorded at 05:02 PM. See you tomorrow!"
    assert rule.rejection_for_duplicate("Bob") == "Bob, you have already timed out for PM today."


def test_suggest_morning_sequence():
    morning = datetime(2026, 2, 2, 8, 0)

    assert suggest_action(_record(), morning) == AttendanceAction.TIME_IN_AM
    assert suggest_action(_record(time_in_am=morning), morning) == AttendanceAction.TIME_OUT_AM
    assert suggest_action(_record(time_in_am=morning, time_out_am=morning), morning) is None


def test_suggest_afternoon_ignores_am_slots():
    afternoon = datetime(2026, 2, 2, 13, 0)

    assert suggest_action(_record(), afternoon) == AttendanceAction.TIME_IN_PM
    assert suggest_action(_record(time_in_pm=afternoon), afternoon) == AttendanceAction.TIME_OUT_PM


@pytest.mark.parametrize("raw", ["Time In AM", "TIME_IN_AM", "  Time In AM  "])
def test_action_parse_accepts_value_or_name(raw):
    assert AttendanceAction.parse(raw) == AttendanceAction.TIME_IN_AM


def test_action_parse_rejects_unknown():
    with pytest.raises(ValueError):
        AttendanceAction.parse("Overtime")


@pytest.mark.parametrize("raw", [None, 5, ["Time In AM"]])
def test_action_parse_rejects_non_text(raw):
    with pytest.raises(ValueError):
        AttendanceAction.parse(raw)
