"""
Exterior Feature and Maintenance Models.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from house_notes.models.enums import FeatureType, MaintenanceType
from house_notes.models.record import Record, coalesce_cost


class ExteriorFeature(Record):
    """A built structure on the lot (deck, shed, fence, ...)."""

    house_id: Optional[str] = None
    feature_type: Optional[Union[FeatureType, str]] = Field(
        default=None, union_mode="left_to_right"
    )
    description: Optional[str] = None
    size: Optional[str] = None
    date_built: Optional[date] = None
    build_cost: Decimal = Field(default=Decimal("0"), ge=0)
    builder_name: Optional[str] = None

    @field_validator("build_cost", mode="before")
    @classmethod
    def _coalesce(cls, value: object) -> object:
        return coalesce_cost(value)


class ExteriorMaintenance(Record):
    """A dated piece of exterior upkeep and what it cost."""

    house_id: Optional[str] = None
    maintenance_type: Optional[Union[MaintenanceType, str]] = Field(
        default=None, union_mode="left_to_right"
    )
    maintenance_date: Optional[date] = None
    cost: Decimal = Field(default=Decimal("0"), ge=0)
    contractor_name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("cost", mode="before")
    @classmethod
    def _coalesce(cls, value: object) -> object:
        return coalesce_cost(value)
