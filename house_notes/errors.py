"""
Exception Taxonomy.

Repositories and record editors raise these; services catch them at the
boundary and translate them into a ``ServiceResult`` with the matching
``status_code``.

    HouseNotesError
    ├── RetrievalError          (503) a read or write to the hosted store failed
    ├── RecordValidationError   (400) required fields missing or out of range
    ├── AuthorizationError      (403) the acting user does not own the row
    ├── AttachmentLimitError    (413) file count or size cap exceeded
    ├── RecordNotFoundError     (404) addressed row absent or soft-deleted
    └── MalformedRecordError    (500) a stored row does not match its model
"""

from __future__ import annotations

from typing import Optional


class HouseNotesError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    public_message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.public_message)
        self.message: str = message or self.public_message


class RetrievalError(HouseNotesError):
    """A request to the hosted store failed (network, server, or client)."""

    status_code = 503
    public_message = "Unable to reach the data service. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        table: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.table: Optional[str] = table


class RecordValidationError(HouseNotesError):
    """Input failed a required-field or range check.

    ``errors`` maps field names to human-readable messages.
    """

    status_code = 400
    public_message = "Please correct the highlighted fields."

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[dict[str, str]] = None,
    ) -> None:
        self.errors: dict[str, str] = dict(errors or {})
        if message is None and self.errors:
            message = "; ".join(self.errors.values())
        super().__init__(message)


class AuthorizationError(HouseNotesError):
    """The acting user may not read or modify the addressed row."""

    status_code = 403
    public_message = "You do not have permission to change this record."


class AttachmentLimitError(HouseNotesError):
    """An upload batch exceeded the configured count or size cap."""

    status_code = 413
    public_message = "Attachment limit exceeded."


class RecordNotFoundError(HouseNotesError):
    """The addressed row does not exist or has been soft-deleted."""

    status_code = 404
    public_message = "Record not found."

    def __init__(
        self,
        message: Optional[str] = None,
        table: Optional[str] = None,
        record_id: Optional[str] = None,
    ) -> None:
        if message is None and table is not None:
            message = f"No active {table} row with id {record_id!r}."
        super().__init__(message)
        self.table: Optional[str] = table
        self.record_id: Optional[str] = record_id


class MalformedRecordError(HouseNotesError):
    """A row came back from the hosted store but failed model validation."""

    status_code = 500
    public_message = "A stored record could not be read."

    def __init__(self, message: Optional[str] = None, table: Optional[str] = None) -> None:
        if message is None and table is not None:
            message = f"A stored {table} row could not be read."
        super().__init__(message)
        self.table: Optional[str] = table


# ---------------------------------------------------------------------------
# Backend error classification
# ---------------------------------------------------------------------------

_RLS_ERROR_CODE: str = "42501"
_RLS_MARKERS: tuple[str, ...] = ("row-level security", "permission denied")


def is_policy_rejection(exc: BaseException) -> bool:
    """Return ``True`` when *exc* is a row-level policy rejection.

    PostgREST surfaces these as ``APIError`` with ``code == "42501"``; the
    message text is also checked for clients that only expose a string.
    """
    code = getattr(exc, "code", None)
    if code is not None and str(code) == _RLS_ERROR_CODE:
        return True
    text = str(getattr(exc, "message", None) or exc).lower()
    return any(marker in text for marker in _RLS_MARKERS)
