"""Request orchestration for the complaint portal endpoints.

Handlers take a :class:`PortalContext` and the decoded JSON body, and
either return a JSON-ready value or raise a
:class:`~complaint_portal_modules.errors.PortalError`. Transport concerns
(methods, body decoding, status codes on success) live in the blueprint.

Validation runs in a fixed order per endpoint and the first failing field
is the one reported.
"""
from typing import Any, Dict, List

import security
from . import eventlog, metrics
from .errors import (AccessDenied, AuthenticationFailed, ComplaintNotFound,
                     DuplicateSecretCode, EmailExists, FieldValidationError,
                     MalformedPayload, PortalError)
from .ids import IdGenerator
from .models import Complaint, User
from .store import ComplaintStore, UserStore
from .validation import (MAX_NAME_LEN, MAX_SUMMARY_LEN, MAX_TITLE_LEN,
                         valid_email, valid_name, valid_rating, valid_summary,
                         valid_title)

# Regenerate on a secret-code clash at most this many times
MAX_SECRET_CODE_ATTEMPTS = 5


class PortalContext:
    """Everything a handler needs: both stores and the id generator."""

    def __init__(self, users: UserStore = None, complaints: ComplaintStore = None,
                 ids: IdGenerator = None):
        self.users = users if users is not None else UserStore()
        self.complaints = complaints if complaints is not None else ComplaintStore()
        self.ids = ids if ids is not None else IdGenerator()

    def seed_admin(self, secret_code: str, name: str, email: str) -> User:
        admin = User(
            id=self.ids.next_id(),
            secret_code=secret_code,
            name=name,
            email=email,
            complaints=[],
            is_admin=True,
        )
        admin = self.users.insert(admin)
        eventlog.event_log('admin_seeded', user_id=admin.id)
        return admin


def _field(payload: Dict[str, Any], name: str, kind):
    """Return ``payload[name]``; a missing field reads as the type's zero value.

    A present field of the wrong JSON type makes the whole body malformed.
    """
    if name not in payload or payload[name] is None:
        return kind()
    value = payload[name]
    if kind is int and isinstance(value, bool):
        raise MalformedPayload()
    if not isinstance(value, kind):
        raise MalformedPayload()
    return value


def _authenticate(ctx: PortalContext, code: str) -> User:
    try:
        return security.authenticate(ctx.users, code)
    except AuthenticationFailed:
        metrics.inc('auth_failures_total')
        eventlog.event_log('auth_failed', reason='empty' if not code else 'unknown')
        raise


def _require_admin(user: User, message: str):
    if not security.is_admin(user):
        eventlog.event_log('access_denied', user_id=user.id, reason='not_admin')
        raise AccessDenied(message)


def _lookup(ctx: PortalContext, complaint_id: str) -> Complaint:
    complaint = ctx.complaints.find_by_id(complaint_id)
    if complaint is None:
        raise ComplaintNotFound()
    return complaint


def register(ctx: PortalContext, payload: Dict[str, Any]) -> Dict[str, Any]:
    name = _field(payload, 'name', str)
    email = _field(payload, 'email', str)
    if not valid_name(name):
        raise FieldValidationError('name', f"Name is required and must be at most {MAX_NAME_LEN} characters")
    if not valid_email(email):
        raise FieldValidationError('email', "Invalid email")
    if ctx.users.email_taken(email):
        raise EmailExists()

    user_id = ctx.ids.next_id()
    for _attempt in range(MAX_SECRET_CODE_ATTEMPTS):
        user = User(
            id=user_id,
            secret_code=ctx.ids.next_secret_code(),
            name=name,
            email=email,
            complaints=[],
            is_admin=False,
        )
        try:
            user = ctx.users.insert(user)
            break
        except DuplicateSecretCode:
            eventlog.append_log(f"secret_code_collision user_id={user_id}")
    else:
        raise PortalError("Could not allocate a unique secret code")

    metrics.inc('users_registered_total')
    eventlog.event_log('user_registered', user_id=user.id)
    return user.to_registration_dict()


def login(ctx: PortalContext, payload: Dict[str, Any]) -> Dict[str, Any]:
    user = _authenticate(ctx, _field(payload, 'secret_code', str))
    metrics.inc('logins_total')
    eventlog.event_log('user_login', user_id=user.id, is_admin=user.is_admin)
    return user.to_dict()


def submit_complaint(ctx: PortalContext, payload: Dict[str, Any]) -> Dict[str, Any]:
    code = _field(payload, 'secret_code', str)
    title = _field(payload, 'title', str)
    summary = _field(payload, 'summary', str)
    rating = _field(payload, 'rating', int)
    user = _authenticate(ctx, code)
    if not valid_title(title):
        raise FieldValidationError('title', f"Title is required and must be at most {MAX_TITLE_LEN} characters")
    if not valid_summary(summary):
        raise FieldValidationError('summary', f"Summary is required and must be at most {MAX_SUMMARY_LEN} characters")
    if not valid_rating(rating):
        raise FieldValidationError('rating', "Rating must be between 1 and 10")

    complaint = Complaint(
        id=ctx.ids.complaint_id(),
        title=title,
        summary=summary,
        rating=rating,
        user_id=user.id,
        user_name=user.name,
    )
    # complaint store first, then the owner's list; never both locks at once
    complaint = ctx.complaints.insert(complaint)
    ctx.users.append_complaint(user, complaint.id)

    metrics.inc('complaints_submitted_total')
    eventlog.event_log('complaint_submitted', complaint_id=complaint.id, user_id=user.id, rating=rating)
    return complaint.to_dict()


def list_own_complaints(ctx: PortalContext, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    user = _authenticate(ctx, _field(payload, 'secret_code', str))
    return [c.to_dict() for c in ctx.complaints.find_many(user.complaints)]


def list_all_complaints(ctx: PortalContext, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    user = _authenticate(ctx, _field(payload, 'secret_code', str))
    _require_admin(user, "Only administrators can access this endpoint")
    return [c.to_dict() for c in ctx.complaints.all()]


def view_complaint(ctx: PortalContext, payload: Dict[str, Any]) -> Dict[str, Any]:
    code = _field(payload, 'secret_code', str)
    complaint_id = _field(payload, 'complaint_id', str)
    user = _authenticate(ctx, code)
    complaint = _lookup(ctx, complaint_id)
    if not security.can_view(user, complaint):
        eventlog.event_log('access_denied', user_id=user.id, complaint_id=complaint.id, reason='not_owner')
        raise AccessDenied("You can only view your own complaints")
    return complaint.to_dict()


def resolve_complaint(ctx: PortalContext, payload: Dict[str, Any]) -> Dict[str, Any]:
    code = _field(payload, 'secret_code', str)
    complaint_id = _field(payload, 'complaint_id', str)
    user = _authenticate(ctx, code)
    _require_admin(user, "Only administrators can resolve complaints")
    _lookup(ctx, complaint_id)
    complaint = ctx.complaints.mark_resolved(complaint_id)
    metrics.inc('complaints_resolved_total')
    eventlog.event_log('complaint_resolved', complaint_id=complaint.id, admin_id=user.id)
    return complaint.to_dict()
