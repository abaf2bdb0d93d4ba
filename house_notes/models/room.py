"""
Room Model.

Rooms are counted by type; a count of 1.5 expresses a half bathroom.
Basement and garage detail flags are only kept on rooms of that type.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from house_notes.models.choices import Known, RoomTypeChoice, choice_label
from house_notes.models.enums import RoomTypeName
from house_notes.models.record import Record
from house_notes.utils.pluralize import pluralize


class BasementDetails(BaseModel):
    unfinished: bool = False
    partially_finished: bool = False
    finished: bool = False
    crawl_space: bool = False


class GarageDetails(BaseModel):
    one_car: bool = False
    two_car: bool = False
    other: bool = False


class Room(Record):
    """A counted room of one type within a house."""

    choice_fields: ClassVar = {"room_type": RoomTypeName}

    house_id: Optional[str] = None
    room_type: Optional[RoomTypeChoice] = None
    count: Decimal = Field(default=Decimal("1"), ge=0)
    notes: Optional[str] = None
    basement_details: Optional[BasementDetails] = None
    garage_details: Optional[GarageDetails] = None

    @field_validator("count", mode="before")
    @classmethod
    def _default_count(cls, value: object) -> object:
        return Decimal("1") if value is None or value == "" else value

    @field_validator("count")
    @classmethod
    def _one_decimal(cls, value: Decimal) -> Decimal:
        return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    @model_validator(mode="after")
    def _drop_foreign_details(self) -> "Room":
        if not self._is(RoomTypeName.BASEMENT):
            self.basement_details = None
        if not self._is(RoomTypeName.GARAGE):
            self.garage_details = None
        return self

    def _is(self, name: RoomTypeName) -> bool:
        return isinstance(self.room_type, Known) and self.room_type.value == name

    @property
    def type_name(self) -> str:
        return choice_label(self.room_type)

    @property
    def label(self) -> str:
        """Pluralized display label, e.g. ``"Bedrooms"`` for a count of 3."""
        return pluralize(self.type_name, self.count)

    @property
    def display_count(self) -> str:
        """Count without a trailing ``.0`` (``"2"``, ``"1.5"``)."""
        if self.count == self.count.to_integral_value():
            return str(int(self.count))
        return str(self.count)
