from __future__ import annotations

import csv
import io

import pandas as pd
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from .service import ReportData

EXPORT_COLUMNS = [
    ("date", "Date"),
    ("name", "Name"),
    ("time_in_am", "Time In (AM)"),
    ("time_out_am", "Time Out (AM)"),
    ("time_in_pm", "Time In (PM)"),
    ("time_out_pm", "Time Out (PM)"),
    ("worked_hours", "Hours"),
]

HEADERS = [label for _, label in EXPORT_COLUMNS]


def _table(report: ReportData) -> list[list[str]]:
    return [[str(row.get(key, "-")) for key, _ in EXPORT_COLUMNS] for row in report.rows]


def to_csv(report: ReportData) -> bytes:
    """CSV export; header-only when the report has no rows."""

    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(HEADERS)
    writer.writerows(_table(report))
    return out.getvalue().encode("utf-8-sig")


def to_xlsx(report: ReportData) -> bytes:
    df = pd.DataFrame(_table(report), columns=HEADERS)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="DTR")
    return out.getvalue()


_PDF_X = [40, 120, 300, 400, 500, 600, 700]
_PDF_ROW_HEIGHT = 18
_PDF_MARGIN = 50


def to_pdf(report: ReportData) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)

    def header(y: float) -> float:
        c.setFont("Helvetica-Bold", 10)
        for x, label in zip(_PDF_X, HEADERS):
            c.drawString(x, y, label)
        c.setFont("Helvetica", 10)
        return y - _PDF_ROW_HEIGHT

    y = height - _PDF_MARGIN
    c.setFont("Helvetica-Bold", 14)
    c.drawString(_PDF_X[0], y, f"Daily Time Record - {report.title}")
    y = header(y - 2 * _PDF_ROW_HEIGHT)

    for values in _table(report):
        if y < _PDF_MARGIN:
            c.showPage()
            y = header(height - _PDF_MARGIN)
        for x, value in zip(_PDF_X, values):
            c.drawString(x, y, value)
        y -= _PDF_ROW_HEIGHT

    c.save()
    return buffer.getvalue()
