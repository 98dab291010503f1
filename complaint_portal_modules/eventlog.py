"""Append-only text and JSON event logs.

``init.log`` holds human readable lines, ``events.log`` holds one JSON
object per line. Both live under a configurable directory and rotate once
they grow past ``LOG_MAX_BYTES``.
"""
import json
import os
import threading
from datetime import datetime, timezone

_settings = {
    'dir': os.environ.get('LOG_DIR', 'logs'),
    'max_bytes': int(os.environ.get('LOG_MAX_BYTES', '1048576')),  # 1 MB default
}
_write_lock = threading.Lock()


def configure(log_dir: str, max_bytes: int = None) -> None:
    """Point the logs at ``log_dir`` (created if missing)."""
    _settings['dir'] = log_dir
    if max_bytes is not None:
        _settings['max_bytes'] = int(max_bytes)
    os.makedirs(log_dir, exist_ok=True)


def utc_now():
    """Return an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(ts) -> str:
    """RFC3339-ish UTC timestamp with trailing Z."""
    return ts.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def utc_now_iso() -> str:
    return to_iso(utc_now())


def _rotate_if_needed(path: str):
    if not os.path.exists(path):
        return
    try:
        if os.path.getsize(path) < _settings['max_bytes']:
            return
        ts = utc_now().strftime('%Y%m%d%H%M%S%f')
        os.rename(path, f"{path}.{ts}")
    except OSError:
        # Rotation is best-effort
        pass


def append_log(line: str):
    path = os.path.join(_settings['dir'], 'init.log')
    stamp = utc_now().strftime("%Y-%m-%d %H:%M:%S")
    try:
        with _write_lock:
            os.makedirs(_settings['dir'], exist_ok=True)
            _rotate_if_needed(path)
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"[{stamp}] {line}\n")
    except OSError:  # pragma: no cover
        pass


def event_log(event: str, **fields):
    """Structured JSON event log (append-only)."""
    path = os.path.join(_settings['dir'], 'events.log')
    payload = {
        'ts': utc_now_iso(),
        'event': event,
        **fields
    }
    try:
        with _write_lock:
            os.makedirs(_settings['dir'], exist_ok=True)
            _rotate_if_needed(path)
            with open(path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(payload, default=str) + "\n")
    except OSError as e:
        append_log(f"event_log_error {e}")
