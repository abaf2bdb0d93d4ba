"""
House Repository.

Handles data access for houses and their one-per-house property details.
"""

from __future__ import annotations

from typing import Optional

from house_notes.database import DatabaseManager
from house_notes.errors import AuthorizationError, RecordNotFoundError
from house_notes.logger import StructuredLogger
from house_notes.models.house import House, PropertyDetails
from house_notes.repositories.base_repository import HOUSES_TABLE, BaseRepository


class HouseRepository(BaseRepository[House]):
    """Data access layer for House and PropertyDetails entities."""

    TABLE = HOUSES_TABLE
    MODEL = House
    DETAILS_TABLE = "property_details"

    def __init__(self, db: DatabaseManager, logger: StructuredLogger) -> None:
        super().__init__(db, logger)

    # ------------------------------------------------------------------
    # Houses
    # ------------------------------------------------------------------

    def get_active_for_user(self, user_id: str) -> Optional[House]:
        """The user's active house (oldest first if several exist), or ``None``."""
        def _query() -> Optional[House]:
            response = (
                self._select_active()
                .eq("user_id", user_id)
                .order("created_at")
                .limit(1)
                .execute()
            )
            return self._to_model(response.data[0]) if response.data else None

        return self._run(_query, operation_name="get_active_for_user (houses)")

    def get_owned(self, house_id: str, user_id: str) -> House:
        """Fetch an active house after checking it belongs to *user_id*.

        Raises:
            RecordNotFoundError: No active house with that id.
            AuthorizationError: The house belongs to another user.
        """
        row = self._require_row(house_id)
        if row.get("user_id") != user_id:
            self._logger.warning(
                "User %s denied access to house %s", user_id, house_id
            )
            raise AuthorizationError()
        return self._to_model(row)

    def create(self, house: House, user_id: str) -> House:
        row = house.to_row()
        row["user_id"] = user_id
        return self._to_model(self._insert(row))

    def update(self, house_id: str, house: House, user_id: str) -> House:
        self._require_house_owner(house_id, user_id)
        patch = house.to_row(exclude={"user_id"})
        return self._to_model(self._update(house_id, patch))

    def soft_delete(self, house_id: str, user_id: str) -> str:
        self._require_house_owner(house_id, user_id)
        return self._mark_deleted(house_id)

    def restore(self, house_id: str, user_id: str) -> House:
        self._require_house_owner(house_id, user_id, include_deleted=True)
        return self._to_model(self._clear_deleted(house_id))

    # ------------------------------------------------------------------
    # Property details
    # ------------------------------------------------------------------

    def get_property_details(self, house_id: str) -> Optional[PropertyDetails]:
        def _query() -> Optional[PropertyDetails]:
            response = (
                self._select_active(self.DETAILS_TABLE)
                .eq("house_id", house_id)
                .limit(1)
                .execute()
            )
            return self._to_model(response.data[0], PropertyDetails) if response.data else None

        return self._run(_query, operation_name="get_property_details")

    def upsert_property_details(
        self, details: PropertyDetails, user_id: str
    ) -> PropertyDetails:
        """Insert or replace the details row keyed on ``house_id``."""
        self._require_house_owner(details.house_id, user_id)
        row = details.to_row()
        row["deleted_at"] = None

        def _query() -> PropertyDetails:
            response = (
                self.supabase.table(self.DETAILS_TABLE)
                .upsert(row, on_conflict="house_id")
                .execute()
            )
            if not response.data:
                raise RecordNotFoundError(table=self.DETAILS_TABLE, record_id=details.house_id)
            return self._to_model(response.data[0], PropertyDetails)

        return self._run(_query, operation_name="upsert_property_details")
