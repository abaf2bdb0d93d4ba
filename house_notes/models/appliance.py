"""
Interior Appliance, Repair and Attachment Models.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from house_notes.models.enums import ApplianceType
from house_notes.models.record import Record, coalesce_cost


class Appliance(Record):
    """An interior appliance with its purchase and installation costs."""

    house_id: Optional[str] = None
    # Stored as unconstrained text; unlisted values stay plain strings.
    appliance_type: Optional[Union[ApplianceType, str]] = Field(
        default=None, union_mode="left_to_right"
    )
    brand: Optional[str] = None
    model: Optional[str] = None
    date_purchased: Optional[date] = None
    date_installed: Optional[date] = None
    installer_name: Optional[str] = None
    purchase_cost: Decimal = Field(default=Decimal("0"), ge=0)
    installation_cost: Decimal = Field(default=Decimal("0"), ge=0)
    purchase_location: Optional[str] = None
    support_link: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("purchase_cost", "installation_cost", mode="before")
    @classmethod
    def _coalesce(cls, value: object) -> object:
        return coalesce_cost(value)

    @property
    def title(self) -> str:
        """``"Brand Model"`` when known, else the appliance type."""
        parts = [p for p in (self.brand, self.model) if p]
        if parts:
            return " ".join(parts)
        return str(self.appliance_type or "Appliance")


class Repair(Record):
    """A repair performed on one appliance."""

    appliance_id: Optional[str] = None
    repair_date: Optional[date] = None
    repair_cost: Decimal = Field(default=Decimal("0"), ge=0)
    technician_name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("repair_cost", mode="before")
    @classmethod
    def _coalesce(cls, value: object) -> object:
        return coalesce_cost(value)


class Attachment(Record):
    """A file attached to an appliance, stored inline as a data URI."""

    appliance_id: Optional[str] = None
    file_name: str
    file_url: str
    file_type: str = "application/octet-stream"
    file_size: int = Field(default=0, ge=0)
    description: Optional[str] = None
