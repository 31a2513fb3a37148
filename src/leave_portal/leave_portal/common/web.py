from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    return jsonify({"message": message}), status


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Please log in to continue", 401)
            if session.get("role") not in allowed:
                return error_response("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def api_errors(failure_message: str):
    """Translate domain exceptions raised by a view into JSON error responses."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return error_response(str(e), 400)
            except AuthenticationError as e:
                return error_response(str(e), 401)
            except AuthorizationError as e:
                return error_response(str(e), 403)
            except Exception:
                logger.exception("%s failed", view.__name__)
                return error_response(failure_message, 500)

        return wrapper

    return decorator
