from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import api_errors, current_role, current_user_id, login_required, roles_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from .service import profile_from_payload


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    @api_errors("Login failed due to a server error")
    def login():
        data = request.get_json(silent=True) or {}
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return jsonify({"userId": s_user.user_id, "fullName": s_user.full_name, "roles": [s_user.role.value]})

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/users/employees", methods=["GET"], endpoint="list_employees")
    @login_required
    @api_errors("Failed to load employees")
    def list_employees():
        return jsonify(container.user_service.list_employees())

    @app.route("/users/employee", methods=["POST"], endpoint="create_employee")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to add employee")
    def create_employee():
        data = request.get_json(silent=True) or {}
        user_id = container.user_service.create_employee(
            current_role=current_role(),
            profile=profile_from_payload(data),
            username=data.get("username", ""),
        )
        return jsonify({"message": "Employee added successfully!", "id": str(user_id)}), 201

    @app.route("/users/<int:user_id>", methods=["PATCH"], endpoint="update_employee")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to update employee")
    def update_employee(user_id: int):
        container.user_service.update_employee(
            current_role=current_role(),
            user_id=user_id,
            profile=profile_from_payload(request.get_json(silent=True)),
        )
        return jsonify({"message": "Employee updated successfully!"})

    @app.route("/users/<int:user_id>", methods=["DELETE"], endpoint="delete_employee")
    @roles_required(Role.ADMIN)
    @api_errors("Failed to delete employee")
    def delete_employee(user_id: int):
        container.user_service.delete_employee(current_role=current_role(), user_id=user_id)
        return jsonify({"message": "Employee deleted"})

    @app.route("/users/profile", methods=["GET"], endpoint="profile")
    @login_required
    @api_errors("Failed to load profile")
    def profile():
        return jsonify(container.user_service.get_profile(user_id=current_user_id()))

    @app.route("/users/change-password", methods=["PATCH"], endpoint="change_password")
    @login_required
    @api_errors("Failed to change password")
    def change_password():
        data = request.get_json(silent=True) or {}
        container.user_service.change_password(
            user_id=current_user_id(),
            current_password=data.get("currentPassword", ""),
            new_password=data.get("newPassword", ""),
        )
        return jsonify({"message": "Password changed successfully"})
