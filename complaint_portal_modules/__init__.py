"""complaint_portal_modules package
Core of the complaint portal: stores, validation, handlers and the
logging/metrics helpers they share.
"""
from . import errors, eventlog, handlers, ids, metrics, models, store, validation

__all__ = [
    "errors",
    "eventlog",
    "handlers",
    "ids",
    "metrics",
    "models",
    "store",
    "validation",
]
