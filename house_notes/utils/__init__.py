"""Shared utility functions for House Life Notes.

Convenience re-exports so consumers can import directly from
``house_notes.utils``.
"""

from house_notes.utils.audit import AuditEvent, log_audit_event
from house_notes.utils.currency import (
    format_currency,
    get_currency_info,
    get_currency_symbol,
)
from house_notes.utils.pluralize import pluralize

__all__ = [
    "AuditEvent",
    "format_currency",
    "get_currency_info",
    "get_currency_symbol",
    "log_audit_event",
    "pluralize",
]
