from __future__ import annotations

from functools import wraps

from flask import jsonify, session


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("is_admin"):
            return json_error("Please log in as administrator.", 401)
        return view(*args, **kwargs)

    return wrapper
