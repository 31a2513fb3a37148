from __future__ import annotations

import io
from datetime import date

import pytest
from openpyxl import load_workbook

from src.leave_portal.leave_portal.core.enums import RequestSource, RequestStatus, RequestType
from src.leave_portal.leave_portal.reports.service import EXPORT_COLUMNS, SHEET_NAME, HRReportService
from src.leave_portal.leave_portal.requests.model import NewRequest


def _new(employee_id, rtype, start, end, status=RequestStatus.APPROVED, notes="note"):
    return NewRequest(
        employee_id=employee_id,
        type=rtype,
        start_date=start,
        end_date=end,
        number_of_days=(end - start).days + 1,
        notes=notes,
        status=status,
        source=RequestSource.ADMIN_DIRECT,
    )


@pytest.fixture
def svc(requests_repo):
    requests_repo.create(_new(2, RequestType.WFH, date(2024, 6, 9), date(2024, 6, 9), notes="Work From Home"))
    requests_repo.create(_new(3, RequestType.VACATION, date(2024, 6, 10), date(2024, 6, 12)))
    requests_repo.create(_new(2, RequestType.VACATION, date(2024, 6, 11), date(2024, 6, 11), status=RequestStatus.PENDING))
    return HRReportService(requests_repo)


def test_build_rows_contains_approved_only(svc):
    rows = svc.build_rows()
    assert [r["employeeName"] for r in rows] == ["Omar Hassan", "Mona Adel"]

    first = rows[0]
    assert first["code"] == "EMP-002"
    assert first["fingerprint"] == "1001"
    assert first["jobPosition"] == "Developer"
    assert first["branch"] == "Head Office"
    assert first["timeOffType"] == "WFH"
    assert first["purpose"] == "Work From Home"
    assert first["startDate"] == "2024-06-09"
    assert first["numberOfDays"] == 1


def test_build_rows_filters_by_type(svc):
    rows = svc.build_rows(request_type=RequestType.VACATION)
    assert [r["employeeName"] for r in rows] == ["Mona Adel"]
    assert rows[0]["numberOfDays"] == 3


def test_build_rows_filters_by_start_or_end_date(svc):
    assert [r["employeeName"] for r in svc.build_rows(on_date=date(2024, 6, 12))] == ["Mona Adel"]
    assert svc.build_rows(on_date=date(2024, 6, 11)) == []


def test_export_excel_writes_header_and_rows(svc):
    content = svc.export_excel(svc.build_rows())

    wb = load_workbook(io.BytesIO(content))
    assert wb.sheetnames == [SHEET_NAME]
    ws = wb[SHEET_NAME]

    headers = [c.value for c in ws[1]]
    assert headers == [header for _, header, _ in EXPORT_COLUMNS]
    assert ws.freeze_panes == "A2"
    assert ws.max_row == 3
    assert ws.cell(row=2, column=3).value == "Omar Hassan"
    assert ws.cell(row=3, column=10).value == 3


def test_export_excel_with_no_rows_still_has_header(svc):
    ws = load_workbook(io.BytesIO(svc.export_excel([])))[SHEET_NAME]
    assert ws.max_row == 1
    assert ws.cell(row=1, column=1).value == "code"


def test_export_file_name():
    assert HRReportService.export_file_name(date(2024, 6, 12)) == "HR_Report_2024-06-12.xlsx"
