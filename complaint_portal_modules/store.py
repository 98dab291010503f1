"""Thread-safe in-memory stores for users and complaints.

Each store owns its collection and a single reader/writer lock: many
readers, or one writer, never both. Lookups hand out snapshot copies so a
caller never sees an entry change (or half-change) underneath it.
"""
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

from .errors import (AlreadyResolved, ComplaintNotFound, DuplicateComplaintId,
                     DuplicateSecretCode, EmailExists)
from .eventlog import utc_now
from .models import STATUS_RESOLVED, Complaint, User


class RWLock:
    """Readers/writer lock; waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class UserStore:
    """Users keyed by secret code, with a unique email index."""

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._by_email: Dict[str, str] = {}  # email -> secret code
        self._lock = RWLock()

    def insert(self, user: User) -> User:
        with self._lock.write_locked():
            if user.secret_code in self._users:
                raise DuplicateSecretCode()
            if user.email in self._by_email:
                raise EmailExists()
            stored = user.snapshot()
            self._users[stored.secret_code] = stored
            self._by_email[stored.email] = stored.secret_code
            return stored.snapshot()

    def find_by_code(self, code: str) -> Optional[User]:
        with self._lock.read_locked():
            user = self._users.get(code)
            return user.snapshot() if user is not None else None

    def email_taken(self, email: str) -> bool:
        with self._lock.read_locked():
            return email in self._by_email

    def append_complaint(self, user: User, complaint_id: str) -> None:
        with self._lock.write_locked():
            stored = self._users.get(user.secret_code)
            if stored is None:
                raise KeyError(user.secret_code)
            stored.complaints.append(complaint_id)

    def __len__(self):
        with self._lock.read_locked():
            return len(self._users)


class ComplaintStore:
    """Complaints keyed by id."""

    def __init__(self):
        self._complaints: Dict[str, Complaint] = {}
        self._lock = RWLock()

    def insert(self, complaint: Complaint) -> Complaint:
        with self._lock.write_locked():
            if complaint.id in self._complaints:
                raise DuplicateComplaintId()
            stored = complaint.snapshot()
            self._complaints[stored.id] = stored
            return stored.snapshot()

    def find_by_id(self, complaint_id: str) -> Optional[Complaint]:
        with self._lock.read_locked():
            c = self._complaints.get(complaint_id)
            return c.snapshot() if c is not None else None

    def find_many(self, complaint_ids: List[str]) -> List[Complaint]:
        """Complaints for ``complaint_ids`` in the given order; unknown ids are skipped."""
        with self._lock.read_locked():
            return [self._complaints[cid].snapshot() for cid in complaint_ids if cid in self._complaints]

    def all(self) -> List[Complaint]:
        with self._lock.read_locked():
            return [c.snapshot() for c in self._complaints.values()]

    def mark_resolved(self, complaint_id: str) -> Complaint:
        # check-and-set must stay inside one write section
        with self._lock.write_locked():
            c = self._complaints.get(complaint_id)
            if c is None:
                raise ComplaintNotFound()
            if c.is_resolved:
                raise AlreadyResolved()
            c.status = STATUS_RESOLVED
            c.resolved_at = utc_now()
            return c.snapshot()

    def __len__(self):
        with self._lock.read_locked():
            return len(self._complaints)
