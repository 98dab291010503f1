"""ComplaintPortal main Flask app module.

Users register for a secret code, file complaints with it, and
administrators review and resolve them. State is in memory only.
"""
from flask import Flask, jsonify, request
from werkzeug.exceptions import MethodNotAllowed, NotFound
import os
import time
import uuid

from complaint_api import complaint_api_bp
from complaint_portal_modules import eventlog, metrics
from complaint_portal_modules import errors as portal_errors
from complaint_portal_modules.handlers import PortalContext

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


# -----------------------------
# Simple .env loader (no external dependency) executed *before* reading env vars
# -----------------------------
def load_dotenv(path: str = '.env') -> None:
    if not os.path.exists(path):
        return
    with open(path, 'r') as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith('#'):
                continue
            if '=' not in line:
                continue
            k, v = line.split('=', 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            os.environ.setdefault(k, v)  # do not override existing explicit env


load_dotenv(os.path.join(BASE_DIR, '.env'))


def _truthy(s) -> bool:
    return str(s).lower() in ("1", "true", "yes", "on")


def _env_config() -> dict:
    return {
        'PORT': int(os.environ.get('PORT', '8081')),
        'ADMIN_SECRET_CODE': os.environ.get('ADMIN_SECRET_CODE', 'ADMIN123'),
        'ADMIN_NAME': os.environ.get('ADMIN_NAME', 'Admin User'),
        'ADMIN_EMAIL': os.environ.get('ADMIN_EMAIL', 'admin@bugsmirror.com'),
        'LOG_DIR': os.environ.get('LOG_DIR', 'logs'),
        'LOG_MAX_BYTES': int(os.environ.get('LOG_MAX_BYTES', '1048576')),
        'ACCESS_LOG_JSON': _truthy(os.environ.get('ACCESS_LOG_JSON', '0')),
        'GIT_SHA': os.environ.get('GIT_SHA', 'unknown'),
        'BUILD_TIME': os.environ.get('BUILD_TIME', 'unknown'),
    }


def _error_response(err: portal_errors.PortalError, headers: dict = None):
    metrics.inc('errors_total')
    return jsonify(err.to_dict()), err.status, headers or {}


def create_app(overrides: dict = None) -> Flask:
    """Build the app with fresh stores and a seeded admin account.

    ``overrides`` replaces any of the environment-derived config keys.
    """
    app = Flask(__name__)
    app.config.update(_env_config())
    if overrides:
        app.config.update(overrides)

    eventlog.configure(app.config['LOG_DIR'], app.config['LOG_MAX_BYTES'])

    ctx = PortalContext()
    ctx.seed_admin(app.config['ADMIN_SECRET_CODE'], app.config['ADMIN_NAME'], app.config['ADMIN_EMAIL'])
    app.extensions['complaint_portal'] = ctx

    app.register_blueprint(complaint_api_bp)
    _register_ops(app)

    eventlog.append_log(f"ComplaintPortal initialized | log_dir={app.config['LOG_DIR']}")
    eventlog.event_log('app_initialized', users=len(ctx.users))
    return app


def _register_ops(app: Flask):
    ctx: PortalContext = app.extensions['complaint_portal']

    @app.before_request
    def _access_start():
        request._start_time = time.time()  # pylint: disable=protected-access
        # Reuse a request id set by a reverse proxy
        incoming = request.headers.get('X-Request-Id')
        request.request_id = incoming or uuid.uuid4().hex  # type: ignore[attr-defined]
        metrics.inc('requests_total')

    @app.after_request
    def _set_headers(resp):
        resp.headers.setdefault('X-Content-Type-Options', 'nosniff')
        resp.headers.setdefault('X-Frame-Options', 'DENY')
        resp.headers.setdefault('Referrer-Policy', 'no-referrer')
        rid = getattr(request, 'request_id', None)
        if rid:
            resp.headers.setdefault('X-Request-Id', rid)
        if app.config.get('ACCESS_LOG_JSON'):
            started = getattr(request, '_start_time', None)
            dur_ms = int((time.time() - started) * 1000) if started is not None else None
            eventlog.event_log('access',
                               method=request.method,
                               path=request.path,
                               status=resp.status_code,
                               ip=request.remote_addr,
                               dur_ms=dur_ms,
                               request_id=rid)
        return resp

    @app.errorhandler(MethodNotAllowed)
    def _method_not_allowed(e):
        valid = sorted(e.valid_methods or ())
        shown = [m for m in valid if m not in ('HEAD', 'OPTIONS')]
        msg = f"Only {', '.join(shown)} method is allowed" if shown else None
        return _error_response(portal_errors.MethodNotAllowed(msg), {'Allow': ', '.join(valid)} if valid else None)

    @app.errorhandler(NotFound)
    def _not_found(e):
        return _error_response(portal_errors.RouteNotFound())

    @app.errorhandler(500)
    def internal_error(e):
        cause = getattr(e, 'original_exception', None) or e
        eventlog.append_log(f"ERROR_500 path={request.path} error={cause!r}")
        eventlog.event_log('error_500', path=request.path, msg=str(cause))
        return _error_response(portal_errors.PortalError())

    @app.route("/health")
    def health():
        return "OK", 200

    @app.route("/healthz")
    def healthz():
        return jsonify({
            "status": "ok",
            "time": eventlog.utc_now_iso(),
            "users": len(ctx.users),
            "complaints": len(ctx.complaints),
        }), 200

    @app.route("/version")
    def version():
        return jsonify({
            "git_sha": app.config['GIT_SHA'],
            "build_time": app.config['BUILD_TIME'],
            "app": "ComplaintPortal"
        }), 200

    @app.route('/metrics')
    def metrics_view():
        return metrics.render_text(), 200, {'Content-Type': 'text/plain; version=0.0.4'}


app = create_app()


if __name__ == "__main__":
    # threaded: one worker thread per in-flight request
    app.run(host="0.0.0.0", port=app.config['PORT'], threaded=True)
