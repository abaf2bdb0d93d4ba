"""
House Service.

Record editor for the user's house and its property details, plus the
combined read used by the house overview (house, rooms and property
details fetched concurrently).
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping, Optional, Union

from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger
from house_notes.models.house import House, PropertyDetails
from house_notes.models.service_models import HouseDetails, ServiceResult
from house_notes.repositories.house_repository import HouseRepository
from house_notes.repositories.room_repository import RoomRepository
from house_notes.services.base_service import RecordEditorService
from house_notes.services.validation import (
    check_year,
    coerce_record,
    raise_if_errors,
    require_other_text,
)

HouseInput = Union[House, Mapping[str, Any]]
DetailsInput = Union[PropertyDetails, Mapping[str, Any]]

_ENTITY = "houses"


def validate_house(house: House) -> None:
    """Years must be four-digit and a sale cannot precede the purchase."""
    errors: dict[str, str] = {}
    check_year(errors, "year_built", house.year_built, "Year built")
    check_year(errors, "year_bought", house.year_bought, "Year bought")
    check_year(errors, "year_sold", house.year_sold, "Year sold")
    if (
        "year_sold" not in errors
        and house.year_sold is not None
        and house.year_bought is not None
        and house.year_sold < house.year_bought
    ):
        errors["year_sold"] = "Year sold cannot be before year bought"
    require_other_text(errors, "country", house.country, "Country")
    raise_if_errors(errors)


def validate_property_details(details: PropertyDetails) -> None:
    errors: dict[str, str] = {}
    require_other_text(errors, "sewage_type", details.sewage_type, "Sewage type")
    require_other_text(errors, "story", details.story, "Story count")
    require_other_text(errors, "build_style", details.build_style, "Build style")
    require_other_text(errors, "color_type", details.color_type, "Color type")
    raise_if_errors(errors)


class HouseService(RecordEditorService):
    """Create, update, soft-delete and read the user's house.

    Parameters
    ----------
    db:
        Database manager (audit persistence).
    house_repo:
        Houses and property details.
    room_repo:
        Rooms, for the combined details read.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        db: DatabaseManager,
        house_repo: HouseRepository,
        room_repo: RoomRepository,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(db, logger)
        self._house_repo = house_repo
        self._room_repo = room_repo

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_current_house(self, user_id: str) -> ServiceResult[Optional[House]]:
        """The user's active house.  ``data`` is ``None`` when there is none."""
        try:
            return ServiceResult(
                success=True, data=self._house_repo.get_active_for_user(user_id)
            )
        except Exception as exc:
            return self._failure(exc, "house lookup")

    def get_house_details(
        self, house_id: str, user_id: str
    ) -> ServiceResult[HouseDetails]:
        """House, rooms and property details in one call."""
        try:
            with ThreadPoolExecutor(max_workers=3, thread_name_prefix="house") as pool:
                house_future = pool.submit(self._house_repo.get_owned, house_id, user_id)
                rooms_future = pool.submit(self._room_repo.list_active, house_id)
                details_future = pool.submit(
                    self._house_repo.get_property_details, house_id
                )
                house = house_future.result()
                rooms = rooms_future.result()
                details = details_future.result()
            return ServiceResult(
                success=True,
                data=HouseDetails(house=house, rooms=rooms, property_details=details),
            )
        except Exception as exc:
            return self._failure(exc, "house details load")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_house(
        self,
        data: HouseInput,
        user_id: str,
        house_id: Optional[str] = None,
        property_details: Optional[DetailsInput] = None,
    ) -> ServiceResult[HouseDetails]:
        """Create or update the user's house.

        Without *house_id* the user's existing active house is updated
        when there is one, so a user never ends up with two.  Property
        details are upserted when supplied.
        """
        try:
            house = coerce_record(House, data)
            validate_house(house)
            details = (
                coerce_record(PropertyDetails, property_details)
                if property_details is not None
                else None
            )
            if details is not None:
                validate_property_details(details)

            if house_id is None:
                existing = self._house_repo.get_active_for_user(user_id)
                house_id = existing.id if existing is not None else None

            if house_id is None:
                saved = self._house_repo.create(house, user_id)
                action = "CREATE"
            else:
                saved = self._house_repo.update(house_id, house, user_id)
                action = "UPDATE"
            self._audit(action, _ENTITY, saved.id, user_id)

            saved_details = None
            if details is not None:
                saved_details = self._upsert_details(saved.id, details, user_id)

            return ServiceResult(
                success=True,
                data=HouseDetails(house=saved, property_details=saved_details),
            )
        except Exception as exc:
            return self._failure(exc, "house save")

    def save_property_details(
        self, house_id: str, data: DetailsInput, user_id: str
    ) -> ServiceResult[PropertyDetails]:
        try:
            details = coerce_record(PropertyDetails, data)
            validate_property_details(details)
            return ServiceResult(
                success=True, data=self._upsert_details(house_id, details, user_id)
            )
        except Exception as exc:
            return self._failure(exc, "property details save")

    def delete_house(self, house_id: str, user_id: str) -> ServiceResult[str]:
        """Soft-delete; ``data`` is the deletion marker."""
        try:
            marker = self._house_repo.soft_delete(house_id, user_id)
            self._audit("SOFT_DELETE", _ENTITY, house_id, user_id)
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "house delete")

    def restore_house(self, house_id: str, user_id: str) -> ServiceResult[House]:
        try:
            house = self._house_repo.restore(house_id, user_id)
            self._audit("RESTORE", _ENTITY, house_id, user_id)
            return ServiceResult(success=True, data=house)
        except Exception as exc:
            return self._failure(exc, "house restore")

    def _upsert_details(
        self, house_id: Optional[str], details: PropertyDetails, user_id: str
    ) -> PropertyDetails:
        details = details.model_copy(update={"house_id": house_id})
        saved = self._house_repo.upsert_property_details(details, user_id)
        self._audit("UPSERT", HouseRepository.DETAILS_TABLE, house_id, user_id)
        return saved
