import os
from flask import Flask, request

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env", override=False)


from .config import get_config
from .extensions import db, migrate, csrf, login_manager, limiter
from .security import init_security
from .observability import init_logging, init_sentry

def create_app():
    app = Flask(__name__)

    # ---- Rate limiting storage ----
    app_env = (os.getenv("APP_ENV", "development") or "development").lower()
    use_redis = app_env in ("staging", "production")
    storage_uri = os.environ.get("REDIS_URL") if use_redis else "memory://"
    if use_redis and not storage_uri:
        # Hard fail in stage/prod so we never silently run without RL storage
        raise RuntimeError("REDIS_URL is required in staging/production for rate limiting")

    app.config["RATELIMIT_STORAGE_URI"] = storage_uri
    app.config.setdefault("RATELIMIT_HEADERS_ENABLED", True)

    # Config: clean, explicit, class-based
    app.config.from_object(get_config())
    app.config["APP_ENV"] = app_env

    # --- Required env validation for prod-like envs (staging/production) ---
    def _require(name: str):
        val = os.getenv(name)
        if not val:
            raise RuntimeError(f"Missing required environment variable: {name}")
        return val

    if app_env in ("staging", "production"):
        app.config["SECRET_KEY"] = _require("SECRET_KEY")
        app.config["WTF_CSRF_SECRET_KEY"] = app.config["SECRET_KEY"]
        app.config["SQLALCHEMY_DATABASE_URI"] = _require("DATABASE_URL")

    # --- Observability & Security ---
    init_logging(app)
    init_sentry(app)
    if app_env in ("staging", "production"):
        init_security(app)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db, directory="migrations")
    csrf.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)

    # Blueprints
    from .blueprints.auth import bp as auth_bp
    from .blueprints.feedback import bp as feedback_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(feedback_bp)

    @limiter.exempt
    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    register_error_handlers(app)

    # CLI commands (ops-grade utilities)
    from .cli import register_cli
    register_cli(app)

    return app


def register_error_handlers(app):
    from flask_wtf.csrf import CSRFError
    from .services.errors import AccessError, StoreError

    @app.errorhandler(AccessError)
    def handle_access_error(e):
        if isinstance(e, StoreError):
            app.logger.error("store_error", extra={"event": "store_error", "path": request.path})
        return e.to_dict(), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return {"error": "not_found", "code": 404, "message": "Not Found"}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "method_not_allowed", "code": 405, "message": "Method Not Allowed"}, 405

    @app.errorhandler(500)
    def server_error(e):
        return {"error": "server_error", "code": 500, "message": "Internal Server Error"}, 500

    # CSRF error handler (clean 400 instead of generic 500)
    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return {"error": "csrf_failed", "code": 400, "message": e.description}, 400

    # 429 Too Many Requests with Retry-After
    @app.errorhandler(429)
    def too_many_requests(e):
        retry_after = getattr(e, "retry_after", None)
        headers = {}
        payload = {"error": "rate_limited", "code": 429, "message": "Too Many Requests"}
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
            payload["retry_after"] = int(retry_after)
        return payload, 429, headers
