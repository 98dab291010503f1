"""In-memory metrics (simple counters; reset on restart)."""
import threading
import time

_HELP = {
    'requests_total': 'Total HTTP requests (all endpoints)',
    'errors_total': 'Total error responses',
    'users_registered_total': 'Total users registered',
    'logins_total': 'Total successful logins',
    'complaints_submitted_total': 'Total complaints submitted',
    'complaints_resolved_total': 'Total complaints resolved by an administrator',
    'auth_failures_total': 'Total requests rejected for a bad or missing secret code',
}

METRICS = {name: 0 for name in _HELP}
_metrics_lock = threading.Lock()
_START_TIME = time.time()


def inc(metric: str, amt: int = 1):
    with _metrics_lock:
        METRICS[metric] = METRICS.get(metric, 0) + amt


def snapshot() -> dict:
    with _metrics_lock:
        return dict(METRICS)


def reset():
    with _metrics_lock:
        for k in METRICS:
            METRICS[k] = 0


def render_text() -> str:
    # Prometheus style with HELP/TYPE
    lines = []
    for k, v in snapshot().items():
        if k in _HELP:
            lines.append(f"# HELP {k} {_HELP[k]}")
            lines.append(f"# TYPE {k} counter")
        lines.append(f"{k} {v}")
    uptime = int(time.time() - _START_TIME)
    lines.append("# HELP uptime_seconds Application uptime in seconds")
    lines.append("# TYPE uptime_seconds gauge")
    lines.append(f"uptime_seconds {uptime}")
    return "\n".join(lines) + "\n"
