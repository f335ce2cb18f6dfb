from datetime import datetime

import pytest

from src.rfid_dtr.rfid_dtr.attendance.service import AttendanceService
from src.rfid_dtr.rfid_dtr.core.constants import SCAN_FAILED_MESSAGE, UNREGISTERED_CARD_MESSAGE
from src.rfid_dtr.rfid_dtr.core.enums import AttendanceAction


class _ExplodingUsers:
    def get_by_card_uid(self, card_uid):
        raise RuntimeError("directory offline")


def test_unregistered_card_never_reaches_engine(attendance_service, records_repo, fixed_now):
    result = attendance_service.scan("UNKNOWN-CARD", AttendanceAction.TIME_IN_AM, now=fixed_now)

    assert result.success is False
    assert result.message == UNREGISTERED_CARD_MESSAGE
    assert records_repo.reads == 0
    assert records_repo.rows == {}


def test_blank_card_is_rejected(attendance_service, fixed_now):
    result = attendance_service.scan("   ", AttendanceAction.TIME_IN_AM, now=fixed_now)

    assert result.success is False
    assert result.message == "Please scan a valid RFID card."


def test_directory_failure_is_reported_as_scan_failure(records_repo, fixed_now):
    service = AttendanceService(records_repo, _ExplodingUsers())

    result = service.scan("CARD-001", AttendanceAction.TIME_IN_AM, now=fixed_now)

    assert result.success is False
    assert result.message == SCAN_FAILED_MESSAGE


def test_scan_with_selected_action(attendance_service, fixed_now):
    result = attendance_service.scan(" CARD-001 ", "Time In AM", now=fixed_now)

    assert result.success is True
    assert result.user_name == "Alice"
    assert result.time == "08:15 AM"


def test_scan_without_action_requires_opt_in(attendance_service, records_repo, fixed_now):
    result = attendance_service.scan("CARD-001", None, now=fixed_now)

    assert result.success is False
    assert result.message == "Please select an attendance action."
    assert records_repo.rows == {}


def test_auto_determine_walks_the_half_day(attendance_service, fixed_now):
    first = attendance_service.scan("CARD-001", now=fixed_now, auto_determine=True)
    second = attendance_service.scan("CARD-001", now=fixed_now.replace(hour=11, minute=55), auto_determine=True)
    third = attendance_service.scan("CARD-001", now=fixed_now.replace(hour=11, minute=58), auto_determine=True)

    assert first.action == AttendanceAction.TIME_IN_AM
    assert second.action == AttendanceAction.TIME_OUT_AM
    assert third.success is False
    assert third.message == "Alice, you have completed your DTR for today."


def test_auto_determine_in_afternoon_starts_pm_session(attendance_service):
    result = attendance_service.scan("CARD-001", now=datetime(2026, 2, 2, 12, 45), auto_determine=True)

    assert result.success is True
    assert result.action == AttendanceAction.TIME_IN_PM
    assert result.message == "Welcome Alice! Time In PM recorded at 12:45 PM"


@pytest.mark.parametrize("action", [5, ["Time In AM"], {"action": "Time In AM"}])
def test_non_text_action_is_rejected_without_raising(attendance_service, records_repo, fixed_now, action):
    result = attendance_service.scan("CARD-001", action, now=fixed_now)

    assert result.success is False
    assert result.message == "Unknown attendance action."
    assert records_repo.rows == {}
