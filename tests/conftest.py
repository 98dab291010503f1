import json
import os

import pytest


def _read_events(log_dir, event=None):
    """Return the entries of ``events.log`` under ``log_dir``, optionally filtered by name."""
    path = os.path.join(str(log_dir), 'events.log')
    if not os.path.exists(path):
        return []
    out = []
    with open(path, 'r', encoding='utf-8') as f:
        for raw in f:
            raw = raw.strip()
            if not raw:
                continue
            entry = json.loads(raw)
            if event is None or entry.get('event') == event:
                out.append(entry)
    return out


@pytest.fixture
def read_events():
    return _read_events
