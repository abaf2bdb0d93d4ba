"""
Room Service.

Record editor for counted rooms.  Rooms support both a soft delete
(trash/restore) and the irreversible delete used by the room list.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger
from house_notes.models.room import Room
from house_notes.models.service_models import ServiceResult
from house_notes.repositories.room_repository import RoomRepository
from house_notes.services.base_service import RecordEditorService
from house_notes.services.validation import (
    coerce_record,
    raise_if_errors,
    require_other_text,
    require_value,
)

RoomInput = Union[Room, Mapping[str, Any]]


def validate_room(room: Room, *, require_house: bool = True) -> None:
    errors: dict[str, str] = {}
    if require_house:
        require_value(errors, "house_id", room.house_id, "House")
    require_value(errors, "room_type", room.room_type, "Room type")
    require_other_text(errors, "room_type", room.room_type, "Room type")
    raise_if_errors(errors)


class RoomService(RecordEditorService):
    """CRUD for rooms of a house."""

    def __init__(
        self,
        db: DatabaseManager,
        room_repo: RoomRepository,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(db, logger)
        self._repo = room_repo

    def list_rooms(self, house_id: str, user_id: str) -> ServiceResult[list[Room]]:
        """Active rooms, oldest first.  Each carries its ``label``."""
        try:
            return ServiceResult(
                success=True, data=self._repo.list_for_owner(house_id, user_id)
            )
        except Exception as exc:
            return self._failure(exc, "room list")

    def add_room(self, data: RoomInput, user_id: str) -> ServiceResult[Room]:
        try:
            room = coerce_record(Room, data)
            validate_room(room)
            saved = self._repo.create(room, user_id)
            self._audit(
                "CREATE", self._repo.TABLE, saved.id, user_id,
                {"room_type": saved.type_name, "count": str(saved.count)},
            )
            return ServiceResult(success=True, data=saved)
        except Exception as exc:
            return self._failure(exc, "room save")

    def update_room(
        self, room_id: str, data: RoomInput, user_id: str
    ) -> ServiceResult[Room]:
        try:
            room = coerce_record(Room, data)
            validate_room(room, require_house=False)
            saved = self._repo.update(room_id, room, user_id)
            self._audit("UPDATE", self._repo.TABLE, room_id, user_id)
            return ServiceResult(success=True, data=saved)
        except Exception as exc:
            return self._failure(exc, "room save")

    def delete_room(self, room_id: str, user_id: str) -> ServiceResult[None]:
        """Permanently delete the room."""
        try:
            self._repo.permanent_delete(room_id, user_id)
            self._audit("PERMANENT_DELETE", self._repo.TABLE, room_id, user_id)
            return ServiceResult(success=True)
        except Exception as exc:
            return self._failure(exc, "room delete")

    def trash_room(self, room_id: str, user_id: str) -> ServiceResult[str]:
        try:
            marker = self._repo.soft_delete(room_id, user_id)
            self._audit("SOFT_DELETE", self._repo.TABLE, room_id, user_id)
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "room delete")

    def restore_room(self, room_id: str, user_id: str) -> ServiceResult[Room]:
        try:
            room = self._repo.restore(room_id, user_id)
            self._audit("RESTORE", self._repo.TABLE, room_id, user_id)
            return ServiceResult(success=True, data=room)
        except Exception as exc:
            return self._failure(exc, "room restore")

