from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_errors, current_role, current_user_id, login_required, roles_required
from ..container import Container
from ..core.constants import ADMIN_LIST_LIMIT, DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, Role
from ..core.exceptions import ValidationError


def _parse_ranges(data: dict) -> list:
    rows = data.get("dateRanges")
    if rows is None:
        rows = [{"startDate": data.get("startDate"), "endDate": data.get("endDate")}]

    ranges = []
    for row in rows:
        # Incomplete rows in the form are ignored.
        if not row.get("startDate") or not row.get("endDate"):
            continue
        ranges.append((parse_iso_date(row["startDate"]), parse_iso_date(row["endDate"])))
    return ranges


def _int_arg(value, field_name: str, default: int = 0) -> int:
    if value is None or value == "":
        return default
    # JSON booleans and floats are not whole numbers.
    if isinstance(value, (bool, float)):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def _limit_arg(value, default: int) -> int:
    limit = _int_arg(value, "limit", default=default)
    if limit < 1:
        raise ValidationError("limit must be a positive number")
    return limit


def register(app: Flask, container: Container) -> None:
    @app.route("/requests", methods=["GET"], endpoint="list_requests")
    @login_required
    @api_errors("Failed to load requests")
    def list_requests():
        if current_role() == Role.ADMIN:
            status = request.args.get("status")
            try:
                status_filter = RequestStatus(status) if status else None
            except ValueError:
                raise ValidationError("Unknown request status")
            limit = _limit_arg(request.args.get("limit"), ADMIN_LIST_LIMIT)
            return jsonify(
                container.request_service.list_all(current_role=current_role(), status=status_filter, limit=limit)
            )
        limit = _limit_arg(request.args.get("limit"), DEFAULT_LIST_LIMIT)
        return jsonify(container.request_service.list_my_requests(user_id=current_user_id(), limit=limit))

    @app.route("/requests/my", methods=["GET"], endpoint="my_requests")
    @login_required
    @api_errors("Failed to load requests")
    def my_requests():
        limit = _limit_arg(request.args.get("limit"), DEFAULT_LIST_LIMIT)
        return jsonify(container.request_service.list_my_requests(user_id=current_user_id(), limit=limit))

    @app.route("/requests", methods=["POST"], endpoint="create_request")
    @login_required
    @api_errors("Failed to create request")
    def create_request():
        data = request.get_json(silent=True) or {}
        ranges = _parse_ranges(data)
        if len(ranges) != 1:
            raise ValidationError("Please fill in all required fields")
        start_date, end_date = ranges[0]

        request_id = container.request_service.create_request(
            current_role=current_role(),
            user_id=current_user_id(),
            request_type=data.get("type", ""),
            start_date=start_date,
            end_date=end_date,
            notes=data.get("notes", ""),
        )
        return jsonify({"message": "Request submitted", "id": str(request_id)}), 201

    @app.route("/requests/admin", methods=["POST"], endpoint="create_request_for_employee")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to create request")
    def create_request_for_employee():
        data = request.get_json(silent=True) or {}
        request_id = container.request_service.create_for_employee(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            employee_id=_int_arg(data.get("employeeId"), "employeeId"),
            request_type=data.get("type", ""),
            date_ranges=_parse_ranges(data),
            notes=data.get("notes", ""),
        )
        return jsonify({"message": "Request created", "id": str(request_id)}), 201

    @app.route("/requests/<int:request_id>", methods=["PATCH"], endpoint="decide_request")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to update request")
    def decide_request(request_id: int):
        data = request.get_json(silent=True) or {}
        status = data.get("status")
        if status == RequestStatus.APPROVED.value:
            container.request_service.approve(
                current_role=current_role(), admin_user_id=current_user_id(), request_id=request_id
            )
        elif status == RequestStatus.REJECTED.value:
            container.request_service.reject(
                current_role=current_role(), admin_user_id=current_user_id(), request_id=request_id
            )
        else:
            raise ValidationError("Status must be Approved or Rejected")
        return jsonify({"message": f"Request {status.lower()}"})

    @app.route("/requests/all", methods=["DELETE"], endpoint="delete_all_approved")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to delete all requests")
    def delete_all_approved():
        deleted = container.request_service.delete_all_approved(current_role=current_role())
        return jsonify({"deletedCount": deleted})

    @app.route("/requests/<int:request_id>", methods=["DELETE"], endpoint="delete_request")
    @roles_required(Role.ADMIN, Role.HR)
    @api_errors("Failed to delete request")
    def delete_request(request_id: int):
        container.request_service.delete_request(current_role=current_role(), request_id=request_id)
        return jsonify({"message": "Request deleted"})

    @app.route("/requests/week", methods=["GET"], endpoint="my_week")
    @login_required
    @api_errors("Failed to load your week")
    def my_week():
        return jsonify(container.request_service.my_week(user_id=current_user_id()))

    @app.route("/requests/weekly-wfh", methods=["GET"], endpoint="weekly_wfh")

    @login_required
    @api_errors("Failed to load the weekly schedule")
    def weekly_wfh():
        offset = _int_arg(request.args.get("offset"), "offset")
        return jsonify(container.request_service.weekly_schedule(week_offset=offset))

    @app.route("/requests/random-wfh", methods=["POST"], endpoint="random_wfh")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to generate random WFH")
    def random_wfh():
        data = request.get_json(silent=True) or {}
        employee_ids = data.get("selectedEmployeeIds") or []
        if not isinstance(employee_ids, list):
            raise ValidationError("selectedEmployeeIds must be a list")

        result = container.request_service.generate_random_wfh(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            employee_ids=employee_ids,
            days_per_employee=_int_arg(data.get("numberOfDaysPerEmployee"), "numberOfDaysPerEmployee"),
            week_offset=_int_arg(data.get("weekOffset"), "weekOffset"),
        )
        return jsonify(result), 201
