"""Field checks for registration and complaint payloads.

Every check is a pure predicate over a single value; the handlers decide
the order and which error to raise.
"""

MAX_NAME_LEN = 100
MAX_TITLE_LEN = 200
MAX_SUMMARY_LEN = 1000
MIN_RATING = 1
MAX_RATING = 10


def _trimmed_within(value, limit: int) -> bool:
    if not isinstance(value, str):
        return False
    value = value.strip()
    return 0 < len(value) <= limit


def valid_name(name) -> bool:
    return _trimmed_within(name, MAX_NAME_LEN)


def valid_email(email) -> bool:
    """Basic shape check: ``local@domain`` with a dot somewhere in the domain."""
    if not isinstance(email, str) or not email:
        return False
    parts = email.split("@")
    if len(parts) != 2:
        return False
    local, domain = parts
    if not local or not domain:
        return False
    return "." in domain


def valid_title(title) -> bool:
    return _trimmed_within(title, MAX_TITLE_LEN)


def valid_summary(summary) -> bool:
    return _trimmed_within(summary, MAX_SUMMARY_LEN)


def valid_rating(rating) -> bool:
    # bool is an int subclass; True is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        return False
    return MIN_RATING <= rating <= MAX_RATING
