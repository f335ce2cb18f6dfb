from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, json_error
from ..core.exceptions import AuthenticationError, StoreError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        return request.get_json(silent=True) or request.form.to_dict()

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = _payload()
        try:
            admin = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except AuthenticationError as e:
            return json_error(str(e), 401)

        session.clear()
        session["is_admin"] = admin.is_admin
        session["username"] = admin.username
        return jsonify({"success": True, "message": "Logged in successfully"})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "You have been logged out successfully"})

    @app.route("/api/session", methods=["GET"], endpoint="session_info")
    def session_info():
        return jsonify({"authenticated": bool(session.get("is_admin")), "username": session.get("username")})

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        users = container.user_service.list_users()
        return jsonify({"success": True, "users": [u.to_dict() for u in users]})

    @app.route("/admin/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        data = _payload()
        try:
            user = container.user_service.register(
                name=data.get("name", ""),
                card_uid=data.get("cardUID", ""),
                department=data.get("department"),
                email=data.get("email"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except StoreError:
            logger.exception("Failed to register user")
            return json_error("Failed to register user. Please try again.", 500)

        return (
            jsonify(
                {
                    "success": True,
                    "message": f"User {user.name} with Card UID {user.card_uid} added successfully!",
                    "user": user.to_dict(),
                }
            ),
            201,
        )

    @app.route("/admin/users/<user_id>", methods=["PUT"], endpoint="edit_user")
    @admin_required
    def edit_user(user_id: str):
        data = _payload()
        try:
            user = container.user_service.edit(
                user_id,
                name=data.get("name"),
                card_uid=data.get("cardUID"),
                department=data.get("department"),
                email=data.get("email"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except StoreError:
            logger.exception("Failed to update user %s", user_id)
            return json_error("Failed to update user", 500)

        return jsonify({"success": True, "message": f"User {user.name} updated successfully", "user": user.to_dict()})

    @app.route("/admin/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: str):
        try:
            container.user_service.delete(user_id)
        except ValidationError as e:
            return json_error(str(e), 404)
        except StoreError:
            logger.exception("Failed to delete user %s", user_id)
            return json_error("Failed to delete user", 500)

        return jsonify({"success": True, "message": "User deleted successfully"})

    @app.route("/admin/reset", methods=["POST"], endpoint="reset_system")
    @admin_required
    def reset_system():
        try:
            records = container.attendance_service.clear_all()
            users = container.user_service.reset_directory()
        except StoreError:
            logger.exception("System reset failed")
            return json_error("There was an error resetting the system.", 500)

        return jsonify(
            {
                "success": True,
                "message": "All users and attendance records have been deleted.",
                "deletedUsers": users,
                "deletedRecords": records,
            }
        )
