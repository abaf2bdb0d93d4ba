"""
Appliance, Repair and Attachment Repositories.

Repairs and attachments belong to an appliance; their ownership is
resolved through the appliance's house.  Soft-deleting an appliance
cascades to its active children explicitly here, stamping them with the
appliance's own deletion marker so a restore can reverse exactly that
cascade.
"""

from __future__ import annotations

from typing import Sequence

from house_notes.models.appliance import Appliance, Attachment, Repair
from house_notes.repositories.base_repository import (
    APPLIANCES_TABLE,
    BaseRepository,
    HouseChildRepository,
    M,
    Row,
)

REPAIRS_TABLE: str = "appliance_repairs"
ATTACHMENTS_TABLE: str = "appliance_attachments"
_CHILD_TABLES: tuple[str, ...] = (REPAIRS_TABLE, ATTACHMENTS_TABLE)


class ApplianceRepository(HouseChildRepository[Appliance]):
    """Data access layer for Appliance entities."""

    TABLE = APPLIANCES_TABLE
    MODEL = Appliance
    ORDER_BY = ("created_at", True)

    def soft_delete(self, record_id: str, user_id: str) -> str:
        """Soft-delete the appliance, then its active repairs and attachments.

        Returns the shared deletion marker.
        """
        existing = self._require_row(record_id)
        self._require_house_owner(existing.get("house_id"), user_id)
        marker = self._mark_deleted(record_id)
        for table in _CHILD_TABLES:
            count = self._cascade(table, record_id, {"deleted_at": marker}, match=None)
            self._logger.info(
                "Cascaded soft delete of appliance %s to %d %s row(s)",
                record_id, count, table,
            )
        return marker

    def restore(self, record_id: str, user_id: str) -> Appliance:
        """Restore the appliance and the children deleted along with it.

        Children soft-deleted on their own earlier carry a different
        marker and stay deleted.
        """
        existing = self._require_row(record_id, include_deleted=True)
        self._require_house_owner(existing.get("house_id"), user_id)
        marker = existing.get("deleted_at")
        restored = self._clear_deleted(record_id)
        if marker is not None:
            for table in _CHILD_TABLES:
                self._cascade(table, record_id, {"deleted_at": None}, match=marker)
        return self._to_model(restored)

    def permanent_delete(self, record_id: str, user_id: str) -> None:
        """Remove the appliance with its repairs and attachments for good."""
        existing = self._require_row(record_id, include_deleted=True)
        self._require_house_owner(existing.get("house_id"), user_id)
        self._run(
            lambda: self.supabase.rpc(
                "permanent_delete_appliance", {"appliance_id": record_id}
            ).execute(),
            operation_name="permanent_delete_appliance",
        )

    def _cascade(
        self,
        table: str,
        appliance_id: str,
        patch: Row,
        *,
        match: object,
    ) -> int:
        """Update children of *appliance_id* whose ``deleted_at`` equals *match*.

        ``match=None`` selects the active children.
        """
        def _query() -> int:
            query = (
                self.supabase.table(table)
                .update(patch)
                .eq("appliance_id", appliance_id)
            )
            if match is None:
                query = query.is_("deleted_at", "null")
            else:
                query = query.eq("deleted_at", match)
            return len(query.execute().data or [])

        return self._run(_query, operation_name=f"cascade {table}")


class _ApplianceChildRepository(BaseRepository[M]):
    """Rows owned through ``appliance_id``."""

    ORDER_BY: tuple[str, bool] = ("created_at", False)

    def list_active(self, appliance_id: str) -> list[M]:
        return self.list_active_for_appliances([appliance_id])

    def list_active_for_appliances(self, appliance_ids: Sequence[str]) -> list[M]:
        """Active rows for any of *appliance_ids*.

        An empty id list returns ``[]`` without issuing a query.
        """
        ids = list(appliance_ids)
        if not ids:
            return []
        column, desc = self.ORDER_BY

        def _query() -> list[M]:
            response = (
                self._select_active()
                .in_("appliance_id", ids)
                .order(column, desc=desc)
                .execute()
            )
            return [self._to_model(row) for row in response.data or []]

        return self._run(_query, operation_name=f"list {self.TABLE}")

    def soft_delete(self, record_id: str, user_id: str) -> str:
        existing = self._require_row(record_id)
        self._require_appliance_owner(existing.get("appliance_id"), user_id)
        return self._mark_deleted(record_id)


class RepairRepository(_ApplianceChildRepository[Repair]):
    """Repairs are listed most recent first."""

    TABLE = REPAIRS_TABLE
    MODEL = Repair
    ORDER_BY = ("repair_date", True)

    def create(self, repair: Repair, user_id: str) -> Repair:
        self._require_appliance_owner(repair.appliance_id, user_id)
        return self._to_model(self._insert(repair.to_row()))


class AttachmentRepository(_ApplianceChildRepository[Attachment]):
    """Data access layer for Attachment entities."""

    TABLE = ATTACHMENTS_TABLE
    MODEL = Attachment

    def create_batch(
        self,
        appliance_id: str,
        attachments: Sequence[Attachment],
        user_id: str,
    ) -> list[Attachment]:
        """Insert several attachments for one appliance in one request."""
        if not attachments:
            return []
        self._require_appliance_owner(appliance_id, user_id)
        rows = []
        for attachment in attachments:
            row = attachment.to_row()
            row["appliance_id"] = appliance_id
            rows.append(row)

        def _query() -> list[Attachment]:
            response = self.supabase.table(self.TABLE).insert(rows).execute()
            return [self._to_model(row) for row in response.data or []]

        return self._run(_query, operation_name="create_batch (appliance_attachments)")
