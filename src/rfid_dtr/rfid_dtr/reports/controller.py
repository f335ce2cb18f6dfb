from __future__ import annotations

import logging
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_error
from ..container import Container
from ..core.constants import MONTH_KEY_FORMAT
from ..core.exceptions import StoreError, ValidationError
from . import exporters

logger = logging.getLogger(__name__)

_EXPORTS = {
    "csv": (exporters.to_csv, "text/csv"),
    "pdf": (exporters.to_pdf, "application/pdf"),
    "xlsx": (exporters.to_xlsx, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
}


def register(app: Flask, container: Container) -> None:
    def _build_report():
        month = request.args.get("month")
        user_id = request.args.get("user_id") or None
        query = request.args.get("q") or None
        start_s = request.args.get("start")
        end_s = request.args.get("end")

        if start_s and end_s:
            try:
                start, end = parse_iso_date(start_s), parse_iso_date(end_s)
            except ValueError:
                raise ValidationError("Dates must be in YYYY-MM-DD format")
            return container.report_service.build_report(start=start, end=end, user_id=user_id, query=query)

        month = month or date.today().strftime(MONTH_KEY_FORMAT)
        return container.report_service.build_month_report(month, user_id=user_id, query=query)

    @app.route("/admin/records", methods=["GET"], endpoint="admin_records")
    @admin_required
    def admin_records():
        try:
            data = _build_report()
        except ValidationError as e:
            return json_error(str(e), 400)
        except StoreError:
            logger.exception("Failed to load attendance records")
            return json_error("Failed to load attendance records", 500)

        return jsonify({"success": True, "title": data.title, "rows": data.rows, "summary": data.summary})

    @app.route("/admin/records/months", methods=["GET"], endpoint="record_months")
    @admin_required
    def record_months():
        try:
            months = container.report_service.available_months()
        except StoreError:
            logger.exception("Failed to list record months")
            return json_error("Failed to load attendance records", 500)
        return jsonify({"success": True, "months": months})

    @app.route("/admin/records/export.<fmt>", methods=["GET"], endpoint="export_records")
    @admin_required
    def export_records(fmt: str):
        if fmt not in _EXPORTS:
            return json_error(f"Unsupported export format: {fmt}", 404)

        try:
            data = _build_report()
        except ValidationError as e:
            return json_error(str(e), 400)
        except StoreError:
            logger.exception("Failed to export attendance records")
            return json_error("Failed to export attendance records", 500)

        render, mimetype = _EXPORTS[fmt]
        filename = f"attendance_{data.title.replace(' ', '')}.{fmt}"
        return app.response_class(
            render(data),
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
