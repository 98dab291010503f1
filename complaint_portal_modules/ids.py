"""Identifier and secret-code generation."""
import os
import threading
import time

from . import eventlog

SECRET_CODE_BYTES = 8
COMPLAINT_PREFIX = "C"


class IdGenerator:
    """Process-wide counter shared by users and complaints.

    ``next_id`` hands out "1", "2", ... with no gaps or repeats under
    concurrent callers.
    """

    def __init__(self, start: int = 0):
        self._counter = start
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            self._counter += 1
            return str(self._counter)

    def complaint_id(self) -> str:
        return COMPLAINT_PREFIX + self.next_id()

    def next_secret_code(self) -> str:
        """16 uppercase hex chars from the OS entropy source.

        Falls back to a timestamp-derived code if the entropy source is
        unavailable; these codes are lookup keys, not a security boundary.
        """
        try:
            raw = os.urandom(SECRET_CODE_BYTES)
        except (NotImplementedError, OSError) as e:
            eventlog.event_log('secret_code_fallback', error=str(e))
            return f"SC{time.time_ns()}"
        return raw.hex().upper()
