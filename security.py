"""Secret-code authentication and the portal's authorization rules."""
from typing import Optional

from complaint_portal_modules.errors import AuthenticationFailed
from complaint_portal_modules.models import Complaint, User
from complaint_portal_modules.store import UserStore


def authenticate(users: UserStore, code: Optional[str]) -> User:
    """Resolve a secret code to its user.

    The code is presented on every request; there is no session or expiry.
    Raises AuthenticationFailed for an empty or unknown code.
    """
    if not code:
        raise AuthenticationFailed("secret code required")
    user = users.find_by_code(code)
    if user is None:
        raise AuthenticationFailed("invalid secret code")
    return user


def is_admin(user: User) -> bool:
    return bool(user.is_admin)


def can_view(user: User, complaint: Complaint) -> bool:
    """Admins see everything; everyone else only their own complaints."""
    if is_admin(user):
        return True
    return complaint.user_id == user.id
