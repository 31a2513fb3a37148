from __future__ import annotations

import io
import logging
from datetime import date
from typing import Optional, Sequence

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ..common.datetime_utils import format_iso_date
from ..core.enums import RequestStatus, RequestType
from ..requests.repository import RequestRepository

logger = logging.getLogger(__name__)

SHEET_NAME = "HR Report"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (row key, sheet header, column width)
EXPORT_COLUMNS = [
    ("code", "code", 15),
    ("fingerprint", "Employee / Fingerprint", 22),
    ("employeeName", "Employee", 32),
    ("jobPosition", "Employee / Job Position", 28),
    ("branch", "Employee / Branch", 22),
    ("timeOffType", "Time Off Type", 20),
    ("purpose", "Purpose", 38),
    ("startDate", "Start Date", 15),
    ("endDate", "End Date", 15),
    ("numberOfDays", "Number of Days", 15),
]

HEADER_FONT = Font(name="Calibri", bold=True, size=13, color="FFFFFF")
HEADER_FILL = PatternFill(patternType="solid", fgColor="1F4E78")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)


class HRReportService:
    """Approved requests in the layout HR imports into payroll."""

    def __init__(self, requests: RequestRepository):
        self._requests = requests

    def build_rows(self, *, request_type: Optional[RequestType] = None, on_date: Optional[date] = None) -> list[dict]:
        rows = []
        for r in self._requests.list_export_rows(status=RequestStatus.APPROVED):
            if request_type is not None and r["type"] != request_type.value:
                continue
            if on_date is not None and on_date not in (r["start_date"], r["end_date"]):
                continue
            rows.append(
                {
                    "id": str(r["request_id"]),
                    "code": r["employee_code"],
                    "fingerprint": r["fingerprint_code"],
                    "employeeName": r["employee_name"],
                    "jobPosition": r["title"],
                    "branch": r["branch"],
                    "timeOffType": r["type"],
                    "purpose": r["notes"],
                    "startDate": format_iso_date(r["start_date"]),
                    "endDate": format_iso_date(r["end_date"]),
                    "numberOfDays": r["number_of_days"],
                }
            )
        return rows

    def export_excel(self, rows: Sequence[dict]) -> bytes:
        df = pd.DataFrame(
            [[row.get(key, "") for key, _, _ in EXPORT_COLUMNS] for row in rows],
            columns=[header for _, header, _ in EXPORT_COLUMNS],
        )

        # Write into memory (no temp file on disk).
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
            ws = writer.sheets[SHEET_NAME]

            for idx, (_, _, width) in enumerate(EXPORT_COLUMNS, start=1):
                ws.column_dimensions[get_column_letter(idx)].width = width
                cell = ws.cell(row=1, column=idx)
                cell.font = HEADER_FONT
                cell.fill = HEADER_FILL
                cell.alignment = HEADER_ALIGNMENT

            ws.row_dimensions[1].height = 26
            ws.freeze_panes = "A2"
            ws.auto_filter.ref = ws.dimensions

        logger.info("exported %d approved requests to excel", len(rows))
        return output.getvalue()

    @staticmethod
    def export_file_name(today: date) -> str:
        return f"HR_Report_{format_iso_date(today)}.xlsx"
