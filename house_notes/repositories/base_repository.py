"""
Base Repository.

Provides shared infrastructure for all repositories:
- DatabaseManager reference and the hosted query client
- Logger reference
- Error translation from client failures to the application taxonomy
- Active-row helpers (every read filters ``deleted_at IS NULL``)
- Explicit ownership checks against ``houses.user_id``

There is no local fallback for house records: a failed hosted request is
raised as ``RetrievalError`` so callers never mistake it for an empty
result.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import ValidationError
from supabase import Client as SupabaseClient

from house_notes.database import DatabaseManager
from house_notes.errors import (
    AuthorizationError,
    HouseNotesError,
    MalformedRecordError,
    RecordNotFoundError,
    RetrievalError,
    is_policy_rejection,
)
from house_notes.logger import StructuredLogger
from house_notes.models.record import Record

T = TypeVar("T")
M = TypeVar("M", bound=Record)

Row = dict[str, Any]

HOUSES_TABLE: str = "houses"
APPLIANCES_TABLE: str = "interior_appliances"


def utc_now_iso() -> str:
    """Deletion marker value for a soft delete."""
    return datetime.now(timezone.utc).isoformat()


class BaseRepository(Generic[M]):
    """Base class for all repositories. Receives dependencies via __init__."""

    TABLE: str = ""
    MODEL: type[Record] = Record

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        self._db = db
        self._logger = logger

    @property
    def supabase(self) -> SupabaseClient:
        """Returns the Supabase client for hosted operations."""
        return self._db.supabase

    # ------------------------------------------------------------------
    # Execution and error translation
    # ------------------------------------------------------------------

    def _run(self, op: Callable[[], T], *, operation_name: str) -> T:
        """Execute a hosted request, translating client failures.

        Raises
        ------
        AuthorizationError
            The backend's row-level policy rejected the request.
        RetrievalError
            Any other failure (not configured, network, server error).
        """
        try:
            return op()
        except HouseNotesError:
            raise
        except Exception as exc:
            if is_policy_rejection(exc):
                self._logger.warning(
                    "Policy rejected %s: %s", operation_name, exc
                )
                raise AuthorizationError() from exc
            self._logger.error(
                "Hosted request failed for %s: %s",
                operation_name,
                exc,
                exc_info=True,
            )
            raise RetrievalError(
                f"Failed to {operation_name}.", table=self.TABLE
            ) from exc

    def _to_model(self, row: Row, model: Optional[type[Record]] = None) -> M:
        """Validate a returned row.

        Raises
        ------
        MalformedRecordError
            The row does not match the model.
        """
        target = model or self.MODEL
        try:
            return target.model_validate(row)  # type: ignore[return-value]
        except ValidationError as exc:
            self._logger.error(
                "Stored %s row %s failed validation: %s",
                target.__name__,
                row.get("id"),
                exc,
            )
            raise MalformedRecordError(table=self.TABLE) from exc

    # ------------------------------------------------------------------
    # Row helpers
    # ------------------------------------------------------------------

    def _select_active(self, table: Optional[str] = None, columns: str = "*"):
        """Start a select on *table* restricted to non-deleted rows."""
        return (
            self.supabase.table(table or self.TABLE)
            .select(columns)
            .is_("deleted_at", "null")
        )

    def _fetch_row(
        self,
        record_id: str,
        *,
        table: Optional[str] = None,
        include_deleted: bool = False,
        columns: str = "*",
    ) -> Optional[Row]:
        """Return one raw row by id, or ``None`` when absent.

        Soft-deleted rows are only returned with ``include_deleted``.
        """
        name = table or self.TABLE

        def _query() -> Optional[Row]:
            query = self.supabase.table(name).select(columns).eq("id", record_id)
            if not include_deleted:
                query = query.is_("deleted_at", "null")
            response = query.limit(1).execute()
            return response.data[0] if response.data else None

        return self._run(_query, operation_name=f"read {name}/{record_id}")

    def get_by_id(self, record_id: str) -> Optional[M]:
        """Fetch a single active row by primary key."""
        row = self._fetch_row(record_id)
        return self._to_model(row) if row else None

    def _require_row(self, record_id: str, *, include_deleted: bool = False) -> Row:
        row = self._fetch_row(record_id, include_deleted=include_deleted)
        if row is None:
            raise RecordNotFoundError(table=self.TABLE, record_id=record_id)
        return row

    def _insert(self, row: Row) -> Row:
        def _query() -> Row:
            response = self.supabase.table(self.TABLE).insert(row).execute()
            return response.data[0]

        return self._run(_query, operation_name=f"insert into {self.TABLE}")

    def _update(self, record_id: str, patch: Row, *, active_only: bool = True) -> Row:
        """Apply *patch* to one row and return the updated row.

        Raises
        ------
        RecordNotFoundError
            No matching row was updated.
        """

        def _query() -> list[Row]:
            query = self.supabase.table(self.TABLE).update(patch).eq("id", record_id)
            if active_only:
                query = query.is_("deleted_at", "null")
            return query.execute().data or []

        rows = self._run(_query, operation_name=f"update {self.TABLE}/{record_id}")
        if not rows:
            raise RecordNotFoundError(table=self.TABLE, record_id=record_id)
        return rows[0]

    def _mark_deleted(self, record_id: str, deleted_at: Optional[str] = None) -> str:
        """Soft-delete one active row; returns the deletion marker used."""
        marker = deleted_at or utc_now_iso()
        self._update(record_id, {"deleted_at": marker})
        return marker

    def _clear_deleted(self, record_id: str) -> Row:
        """Restore one soft-deleted row."""
        row = self._require_row(record_id, include_deleted=True)
        if row.get("deleted_at") is None:
            return row
        return self._update(record_id, {"deleted_at": None}, active_only=False)

    # ------------------------------------------------------------------
    # Ownership checks
    # ------------------------------------------------------------------

    def _require_house_owner(
        self,
        house_id: Optional[str],
        user_id: str,
        *,
        include_deleted: bool = False,
    ) -> Row:
        """Ensure *user_id* owns *house_id*; returns the house row.

        Raises
        ------
        RecordNotFoundError
            The house does not exist (or is soft-deleted).
        AuthorizationError
            The house belongs to another user.
        """
        if not house_id:
            raise RecordNotFoundError("A house is required.", table=HOUSES_TABLE)
        house = self._fetch_row(
            house_id,
            table=HOUSES_TABLE,
            include_deleted=include_deleted,
            columns="id,user_id,deleted_at",
        )
        if house is None:
            raise RecordNotFoundError(table=HOUSES_TABLE, record_id=house_id)
        if house.get("user_id") != user_id:
            self._logger.warning(
                "User %s denied access to house %s", user_id, house_id
            )
            raise AuthorizationError()
        return house

    def _require_appliance_owner(
        self,
        appliance_id: Optional[str],
        user_id: str,
        *,
        include_deleted: bool = False,
    ) -> Row:
        """Resolve the appliance's house and check ownership; returns the appliance row."""
        if not appliance_id:
            raise RecordNotFoundError("An appliance is required.", table=APPLIANCES_TABLE)
        appliance = self._fetch_row(
            appliance_id,
            table=APPLIANCES_TABLE,
            include_deleted=include_deleted,
            columns="id,house_id,deleted_at",
        )
        if appliance is None:
            raise RecordNotFoundError(table=APPLIANCES_TABLE, record_id=appliance_id)
        self._require_house_owner(appliance.get("house_id"), user_id)
        return appliance


class HouseChildRepository(BaseRepository[M]):
    """Repository for a table whose rows belong to a house via ``house_id``.

    Subclasses set ``ORDER_BY`` for :meth:`list_active`.
    """

    ORDER_BY: tuple[str, bool] = ("created_at", False)

    def list_active(self, house_id: str) -> list[M]:
        """All non-deleted rows of the house in ``ORDER_BY`` order."""
        column, desc = self.ORDER_BY

        def _query() -> list[M]:
            response = (
                self._select_active()
                .eq("house_id", house_id)
                .order(column, desc=desc)
                .execute()
            )
            return [self._to_model(row) for row in response.data or []]

        return self._run(_query, operation_name=f"list {self.TABLE}")

    def list_for_owner(self, house_id: str, user_id: str) -> list[M]:
        """:meth:`list_active` after checking *user_id* owns the house."""
        self._require_house_owner(house_id, user_id)
        return self.list_active(house_id)

    def create(self, record: M, user_id: str) -> M:
        self._require_house_owner(record.house_id, user_id)  # type: ignore[attr-defined]
        return self._to_model(self._insert(record.to_row()))

    def update(self, record_id: str, record: M, user_id: str) -> M:
        """Overwrite the editable columns of an active row.

        The row stays attached to its current house.
        """
        existing = self._require_row(record_id)
        self._require_house_owner(existing.get("house_id"), user_id)
        patch = record.to_row(exclude={"house_id"})
        return self._to_model(self._update(record_id, patch))

    def soft_delete(self, record_id: str, user_id: str) -> str:
        existing = self._require_row(record_id)
        self._require_house_owner(existing.get("house_id"), user_id)
        return self._mark_deleted(record_id)

    def restore(self, record_id: str, user_id: str) -> M:
        existing = self._require_row(record_id, include_deleted=True)
        self._require_house_owner(existing.get("house_id"), user_id)
        return self._to_model(self._clear_deleted(record_id))
