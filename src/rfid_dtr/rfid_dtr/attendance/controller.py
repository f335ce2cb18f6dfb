from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_error
from ..container import Container
from ..core.enums import AttendanceAction
from ..core.exceptions import StoreError

logger = logging.getLogger(__name__)


def _record_view(record) -> dict:
    return {
        "id": record.key.document_id,
        "userId": record.user_id,
        "userName": record.user_name,
        "date": record.work_date.isoformat(),
        "timeInAM": record.time_in_am.display(None),
        "timeOutAM": record.time_out_am.display(None),
        "timeInPM": record.time_in_pm.display(None),
        "timeOutPM": record.time_out_pm.display(None),
        "missedAM": record.missed_am,
        "missedPM": record.missed_pm,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/actions", methods=["GET"], endpoint="list_actions")
    def list_actions():
        return jsonify({"actions": [a.value for a in AttendanceAction]})

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    def api_scan():
        """Kiosk endpoint: one card scan with the operator-selected action."""
        data = request.get_json(silent=True) or {}
        card_uid = str(data.get("cardUID", "")).strip()
        action = data.get("action") or None
        auto = data.get("auto") is True

        result = container.attendance_service.scan(card_uid, action, auto_determine=auto)
        return jsonify(result.to_dict()), (200 if result.success else 400)

    @app.route("/api/records/today/<user_id>", methods=["GET"], endpoint="today_record")
    def today_record(user_id: str):
        record = container.attendance_service.get_today_record(user_id)
        if record is None:
            return jsonify({"success": True, "record": None})
        return jsonify({"success": True, "record": _record_view(record)})

    @app.route("/admin/records/clear", methods=["POST"], endpoint="clear_records")
    @admin_required
    def clear_records():
        try:
            removed = container.attendance_service.clear_all()
        except StoreError:
            logger.exception("Failed to clear attendance records")
            return json_error("Failed to clear attendance records", 500)
        return jsonify(
            {
                "success": True,
                "message": "All attendance records have been removed successfully.",
                "deleted": removed,
            }
        )

    @app.route("/admin/records/<user_id>/<work_date>", methods=["DELETE"], endpoint="delete_record")
    @admin_required
    def delete_record(user_id: str, work_date: str):
        try:
            day = parse_iso_date(work_date)
        except ValueError:
            return json_error("Date must be in YYYY-MM-DD format", 400)

        try:
            deleted = container.attendance_service.delete_day(user_id, day)
        except StoreError:
            logger.exception("Failed to delete record %s/%s", user_id, work_date)
            return json_error("Failed to delete attendance record", 500)

        if not deleted:
            return json_error("Attendance record not found", 404)
        return jsonify({"success": True, "message": "Attendance record deleted"})

    @app.route("/admin/records/close-day", methods=["POST"], endpoint="close_day")
    @admin_required
    def close_day():
        data = request.get_json(silent=True) or {}
        try:
            day = parse_iso_date(str(data.get("date", "")))
        except ValueError:
            return json_error("Date must be in YYYY-MM-DD format", 400)

        try:
            changed = container.attendance_service.close_day(day)
        except StoreError:
            logger.exception("Failed to close %s", day)
            return json_error("Failed to close the day", 500)

        return jsonify({"success": True, "updated": changed})
