# badiclock/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter
from typing import Any, Dict

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from badiclock.api.routes import api as calendar_api
from badiclock.core.badi_calendar import TABLE_RANGE
from badiclock.core.validators import ValidationError
from badiclock.utils.config import config_path, load_config
from badiclock.utils.metrics import GAUGE_APP_UP, MET_REQUESTS, REQ_LATENCY, seed
from badiclock.utils.store import open_store
from badiclock.version import VERSION

log = logging.getLogger(__name__)

OPS_PATHS = ("/", "/health", "/healthz", "/metrics")
SEEDED_ROUTES = OPS_PATHS + (
    "/api/health", "/api/config", "/api/cities",
    "/api/badi/convert", "/api/badi/gregorian", "/api/badi/holy-days",
    "/api/badi/nawruz/<int:year>", "/api/badi/today", "/api/sun",
    "/api/preferences",
)

# ───────────────────────── logging ─────────────────────────
def _configure_logging(app: Flask) -> None:
    # Under gunicorn, reuse its error-log handlers so app and server lines interleave.
    gunicorn_log = logging.getLogger("gunicorn.error")
    if not gunicorn_log.handlers:
        logging.basicConfig(
            level=os.environ.get("LOG_LEVEL", "INFO"),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        return
    app.logger.handlers = gunicorn_log.handlers
    app.logger.setLevel(gunicorn_log.level)
    logging.getLogger("badiclock").handlers = gunicorn_log.handlers
    logging.getLogger("badiclock").setLevel(gunicorn_log.level)

# ───────────────────────── errors ─────────────────────────
def _error_body(error: str, **extra: Any) -> Dict[str, Any]:
    return {"ok": False, "error": error, "path": request.path, **extra}

def _register_errors(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _on_validation(e: ValidationError):
        log.info("%s %s rejected: %s", request.method, request.path, e)
        return jsonify(_error_body("validation_error", details=e.errors())), 400

    @app.errorhandler(HTTPException)
    def _on_http(e: HTTPException):
        log.warning("HTTP %s on %s %s: %s", e.code, request.method, request.path, e.description)
        return jsonify(_error_body("http_error", code=e.code, name=e.name, message=e.description)), e.code

    @app.errorhandler(Exception)
    def _on_unhandled(e: Exception):
        log.error("UNHANDLED %s on %s %s\n%s", type(e).__name__, request.method, request.path, traceback.format_exc())
        return jsonify(_error_body("internal_error", type=type(e).__name__, message=str(e))), 500

# ───────────────────────── liveness & metrics ─────────────────────────
def _register_ops(app: Flask) -> None:
    @app.get("/")
    def index():
        return jsonify(ok=True, service="badi-clock", version=VERSION, health="/health"), 200

    @app.get("/health")
    @app.get("/healthz")
    def liveness():
        return jsonify(ok=True, status="ok"), 200

    @app.get("/favicon.ico")
    def favicon():
        return ("", 204)

    @app.get("/metrics")
    def metrics():
        if not _metrics_authorized():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)

def _metrics_authorized() -> bool:
    # Both METRICS_USER and METRICS_PASS must be set; otherwise /metrics stays closed.
    user, pw = os.getenv("METRICS_USER", ""), os.getenv("METRICS_PASS", "")
    auth = request.authorization
    if not (user and pw and auth and auth.type == "basic"):
        return False
    return auth.username == user and auth.password == pw

def _route_label() -> str:
    return request.url_rule.rule if request.url_rule is not None else request.path

def _install_request_metrics(app: Flask) -> None:
    def tracked() -> bool:
        p = request.path or ""
        return p.startswith("/api/") or p in OPS_PATHS

    @app.before_request
    def _start_timer():
        if tracked():
            MET_REQUESTS.labels(route=_route_label()).inc()
            request._badi_t0 = perf_counter()

    @app.after_request
    def _stop_timer(resp):
        t0 = getattr(request, "_badi_t0", None)
        if t0 is not None:
            REQ_LATENCY.labels(route=_route_label()).observe(perf_counter() - t0)
        return resp

# ───────────────────────── app factory ─────────────────────────
def _load_cfg() -> Dict[str, Any]:
    path = config_path()
    try:
        return load_config(path)
    except FileNotFoundError:
        log.warning("config %s not found; using built-in defaults", path)
        return {}

def create_app() -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)
    app.cfg = _load_cfg()  # type: ignore[attr-defined]
    app.store = open_store(app.cfg)  # type: ignore[attr-defined]
    seed(SEEDED_ROUTES)

    _install_request_metrics(app)
    _register_ops(app)
    _register_errors(app)
    app.register_blueprint(calendar_api)

    log.info(
        "badi-clock %s ready; mode=%s; Naw-Rúz table %s..%s B.E.",
        VERSION, app.cfg.get("mode", "production"), *TABLE_RANGE,  # type: ignore[attr-defined]
    )
    return app

# ───────────────────────── app instance ─────────────────────────
app = create_app()

# Browser clients call the API cross-origin.
CORS(
    app,
    resources={r"/.*": {"origins": os.environ.get("CORS_ALLOW_ORIGIN") or "*"}},
    supports_credentials=False,
    methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=600,
)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
