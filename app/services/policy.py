from functools import wraps
from flask import g, jsonify
from flask_login import current_user
from app.services.errors import AuthorizationError
from app.services.identity import actor_for

def _abort_json(code: int, message: str):
    slug = {401: "unauthorized", 403: "forbidden"}[code]
    return jsonify({"error": slug, "code": code, "message": message}), code

def require_session(fn):
    """
    Resolve the acting (subject, role) pair onto ``g.actor``.
    Anonymous callers get 401; accounts with no usable role get 403.
    """
    @wraps(fn)
    def _wrap(*args, **kwargs):
        if not getattr(current_user, "is_authenticated", False):
            return _abort_json(401, "Sign in required")
        try:
            g.actor = actor_for(current_user)
        except AuthorizationError as exc:
            return _abort_json(403, exc.message)
        return fn(*args, **kwargs)
    return _wrap
