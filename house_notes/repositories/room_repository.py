"""
Room Repository.
"""

from __future__ import annotations

from house_notes.models.room import Room
from house_notes.repositories.base_repository import HouseChildRepository


class RoomRepository(HouseChildRepository[Room]):
    """Data access layer for Room entities."""

    TABLE = "rooms"
    MODEL = Room
    ORDER_BY = ("created_at", False)

    def permanent_delete(self, room_id: str, user_id: str) -> None:
        """Remove the room irreversibly via ``permanent_delete_room``."""
        existing = self._require_row(room_id, include_deleted=True)
        self._require_house_owner(existing.get("house_id"), user_id)
        self._run(
            lambda: self.supabase.rpc(
                "permanent_delete_room", {"room_id": room_id}
            ).execute(),
            operation_name="permanent_delete_room",
        )
