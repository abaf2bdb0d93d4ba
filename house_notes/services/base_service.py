"""
Base Service Class.

Minimal base class standardizing the logger pattern for all services, plus
the translation of the exception taxonomy into ``ServiceResult`` failures.
Services extend this and add their own repository dependencies via __init__.
"""

from __future__ import annotations

from typing import Optional

from house_notes.database import DatabaseManager
from house_notes.errors import (
    AuthorizationError,
    HouseNotesError,
    RecordValidationError,
    RetrievalError,
)
from house_notes.logger import StructuredLogger
from house_notes.models.service_models import ServiceResult
from house_notes.utils.audit import DetailValue, log_audit_event


class BaseService:
    """Base class for all service classes. Provides a logger."""

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger: StructuredLogger = logger

    def _failure(self, exc: Exception, operation: str) -> ServiceResult:
        """Convert *exc* into a failed ``ServiceResult``.

        Validation messages are passed through; authorization and
        retrieval failures use their generic public message.
        """
        if isinstance(exc, RecordValidationError):
            self._logger.info("Validation failed for %s: %s", operation, exc.message)
            return ServiceResult(
                success=False,
                error=exc.message,
                status_code=exc.status_code,
                field_errors=exc.errors,
            )
        if isinstance(exc, (AuthorizationError, RetrievalError)):
            self._logger.warning("%s failed: %s", operation, exc.message)
            return ServiceResult(
                success=False,
                error=exc.public_message,
                status_code=exc.status_code,
            )
        if isinstance(exc, HouseNotesError):
            self._logger.warning("%s failed: %s", operation, exc.message)
            return ServiceResult(
                success=False,
                error=exc.message,
                status_code=exc.status_code,
            )
        self._logger.error(
            "Unexpected failure during %s: %s", operation, exc, exc_info=True,
        )
        return ServiceResult(
            success=False,
            error=f"Unexpected error during {operation}.",
            status_code=500,
        )


class RecordEditorService(BaseService):
    """Base for services that change hosted rows.

    Every state change is written to the audit trail: the JSON log always,
    and the local ``audit_log`` table when one is available.
    """

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._db = db

    def _audit(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[str],
        user_id: str,
        details: Optional[dict[str, DetailValue]] = None,
    ) -> None:
        with self._db.write_lock:
            log_audit_event(
                logger=self._logger,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id or "",
                user_id=user_id,
                details=details,
                conn=self._db.sqlite,
            )
