from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.web import api_errors, roles_required
from ..container import Container
from ..core.enums import RequestType, Role
from ..core.exceptions import ValidationError
from .service import XLSX_MIMETYPE


def register(app: Flask, container: Container) -> None:
    def _filters() -> dict:
        type_s = request.args.get("type") or ""
        date_s = request.args.get("date") or ""
        try:
            request_type = RequestType(type_s) if type_s else None
        except ValueError:
            raise ValidationError("Invalid request type")
        return {
            "request_type": request_type,
            "on_date": parse_iso_date(date_s) if date_s else None,
        }

    @app.route("/requests/approved", methods=["GET"], endpoint="approved_requests")
    @roles_required(Role.ADMIN, Role.HR)
    @api_errors("Failed to load approved requests")
    def approved_requests():
        return jsonify(container.hr_report_service.build_rows(**_filters()))

    @app.route("/hr/export", methods=["GET"], endpoint="hr_export")
    @roles_required(Role.ADMIN, Role.HR)
    @api_errors("Failed to export the HR report")
    def hr_export():
        svc = container.hr_report_service
        content = svc.export_excel(svc.build_rows(**_filters()))
        return send_file(
            io.BytesIO(content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=svc.export_file_name(today_local()),
        )
