from flask import Blueprint, current_app, jsonify, request

from complaint_portal_modules import handlers, metrics
from complaint_portal_modules.errors import MalformedPayload, PortalError

# Blueprint serves the complaint endpoints at the site root
complaint_api_bp = Blueprint("complaint_api", __name__)


def _context() -> handlers.PortalContext:
    return current_app.extensions["complaint_portal"]


def _json_body():
    """Decode the request body as a JSON object, whatever the Content-Type."""
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise MalformedPayload()
    return data


def _dispatch(handler, status: int = 200):
    result = handler(_context(), _json_body())
    return jsonify(result), status


@complaint_api_bp.errorhandler(PortalError)
def _portal_error(e: PortalError):
    metrics.inc("errors_total")
    return jsonify(e.to_dict()), e.status


@complaint_api_bp.route("/register", methods=("POST",), provide_automatic_options=False)
def register():
    """Create a user and hand back its secret code (shown once)."""
    return _dispatch(handlers.register, 201)


@complaint_api_bp.route("/login", methods=("POST",), provide_automatic_options=False)
def login():
    return _dispatch(handlers.login)


@complaint_api_bp.route("/submitComplaint", methods=("POST",), provide_automatic_options=False)
def submit_complaint():
    return _dispatch(handlers.submit_complaint, 201)


@complaint_api_bp.route("/getAllComplaintsForUser", methods=("POST",), provide_automatic_options=False)
def get_all_complaints_for_user():
    return _dispatch(handlers.list_own_complaints)


@complaint_api_bp.route("/getAllComplaintsForAdmin", methods=("POST",), provide_automatic_options=False)
def get_all_complaints_for_admin():
    """Admin only: every complaint in the store, in no particular order."""
    return _dispatch(handlers.list_all_complaints)


@complaint_api_bp.route("/viewComplaint", methods=("POST",), provide_automatic_options=False)
def view_complaint():
    return _dispatch(handlers.view_complaint)


@complaint_api_bp.route("/resolveComplaint", methods=("POST",), provide_automatic_options=False)
def resolve_complaint():
    """Admin only: move a pending complaint to resolved."""
    return _dispatch(handlers.resolve_complaint)
