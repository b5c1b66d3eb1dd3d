# Overview: Request decorators for API routes.

from functools import wraps

from flask import current_app, jsonify

from .validation import ApiError


def handle_api_errors(action: str):
    """
    Turn service exceptions into JSON error responses.

    ApiError subclasses carry their own status and {"error": code} body.
    Anything else is logged with its traceback and answered with an opaque
    500; the real cause stays in the server log.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ApiError as e:
                return jsonify(e.to_dict()), e.status_code
            except Exception:
                current_app.logger.exception("Failed to %s", action)
                return jsonify({"error": "internal"}), 500

        return decorated_function

    return decorator
