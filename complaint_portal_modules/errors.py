"""Error taxonomy for the complaint portal.

Every error a handler can raise carries an HTTP status and a stable
machine-readable code; the blueprint turns them into
``{"error": code, "message": message}`` responses.
"""
from typing import Any, Dict


class PortalError(Exception):
    """Base error with a status and a stable error code."""

    status = 500
    code = "internal_error"
    default_message = "An internal server error occurred"

    def __init__(self, message: str = None, code: str = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class MethodNotAllowed(PortalError):
    status = 405
    code = "method_not_allowed"
    default_message = "Only POST method is allowed"


class MalformedPayload(PortalError):
    status = 400
    code = "invalid_json"
    default_message = "Invalid JSON in request body"


class FieldValidationError(PortalError):
    """A single request field failed validation; ``code`` is ``invalid_<field>``."""

    status = 400

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, code=f"invalid_{field}")


class AuthenticationFailed(PortalError):
    status = 401
    code = "authentication_failed"
    default_message = "invalid secret code"


class AccessDenied(PortalError):
    status = 403
    code = "access_denied"
    default_message = "Access denied"


class ComplaintNotFound(PortalError):
    status = 404
    code = "complaint_not_found"
    default_message = "complaint not found"


class EmailExists(PortalError):
    status = 409
    code = "email_exists"
    default_message = "Email already exists"


class AlreadyResolved(PortalError):
    status = 400
    code = "already_resolved"
    default_message = "Complaint is already resolved"


class DuplicateSecretCode(PortalError):
    """Raised by the user store when a secret code is already taken."""

    status = 409
    code = "duplicate_secret_code"
    default_message = "Secret code already in use"


class DuplicateComplaintId(PortalError):
    status = 409
    code = "duplicate_complaint_id"
    default_message = "Complaint id already in use"


class RouteNotFound(PortalError):
    status = 404
    code = "not_found"
    default_message = "Resource not found"
