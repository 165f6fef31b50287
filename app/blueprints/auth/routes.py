from flask import request, jsonify, current_app
from flask_wtf.csrf import generate_csrf
from app.extensions import limiter, csrf
from app.services import identity
from . import bp


def _login_email_scope():
    email = (_payload().get("email") or "").strip().lower()
    # Keep a stable scope even if email is blank
    return f"login-email:{email or 'missing'}"

def _payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    # JSON arrays/scalars carry no fields
    return data if isinstance(data, dict) else {}

@bp.post("/signup")
@limiter.limit("5 per minute; 20 per hour")
def signup():
    data = _payload()
    user = identity.sign_up(
        data.get("email"),
        data.get("password"),
        data.get("full_name"),
        data.get("role"),
    )
    info = identity.sign_in(user)
    return jsonify({"session": info.to_dict()}), 201

@bp.post("/login")
@limiter.limit("10 per minute; 100 per hour")              # per-IP (anon → IP via _rate_limit_key)
@limiter.limit("5 per minute; 20 per hour", key_func=_login_email_scope)  # per-account
def login():
    data = _payload()
    user = identity.authenticate(data.get("email"), data.get("password"))
    info = identity.sign_in(user)
    return jsonify({"session": info.to_dict()})

@bp.post("/logout")
def logout():
    identity.sign_out()
    return jsonify({"ok": True})

@bp.get("/session")
def current_session():
    info = identity.current_session()
    return jsonify({"session": info.to_dict() if info else None})

@csrf.exempt
@bp.get("/csrf-token")
def csrf_token():
    token = generate_csrf()
    resp = jsonify({"csrf_token": token})
    # keep tokens fresh; avoid caches holding stale tokens
    resp.headers["Cache-Control"] = "no-store"
    resp.set_cookie("csrf_token", token, samesite="Lax", secure=not current_app.debug)
    return resp
