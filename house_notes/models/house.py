"""
House and Property Details Models.

A user tracks one active house.  Purchase and sale figures feed the
lifecycle calculation; ``country`` selects the display currency.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import ClassVar, Optional

from pydantic import Field, field_validator

from house_notes.models.choices import (
    BuildStyleChoice,
    ColorTypeChoice,
    CountryChoice,
    Known,
    SewageTypeChoice,
    StoryChoice,
    choice_label,
)
from house_notes.models.enums import (
    BuildStyle,
    ColorType,
    Country,
    SewageType,
    StoryCount,
)
from house_notes.models.record import Record

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class House(Record):
    """The top-level record a user tracks.

    Invariant: ``year_sold``/``price_sold`` are only set once the house has
    been sold.  Total cost is computed independently of sale status.
    """

    choice_fields: ClassVar = {"country": Country}

    user_id: Optional[str] = None
    year_built: Optional[int] = None
    year_bought: Optional[int] = None
    year_sold: Optional[int] = None
    square_footage: Optional[int] = Field(default=None, ge=0)
    realtor_name: Optional[str] = None
    price_paid: Optional[Decimal] = Field(default=None, ge=0)
    price_sold: Optional[Decimal] = Field(default=None, ge=0)

    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[CountryChoice] = None

    @property
    def is_sold(self) -> bool:
        return self.price_sold is not None or self.year_sold is not None

    @property
    def country_name(self) -> Optional[str]:
        """Country as shown to the user; ``None`` when never chosen."""
        if self.country is None:
            return None
        return choice_label(self.country)

    @property
    def currency_country(self) -> Optional[str]:
        """Country key for currency lookup.

        Free-text countries fall back to the default currency.
        """
        if isinstance(self.country, Known):
            return str(self.country.value)
        if self.country is None:
            return None
        return "Other"


class PropertyDetails(Record):
    """Lot and construction details, one row per house (unique ``house_id``)."""

    choice_fields: ClassVar = {
        "sewage_type": SewageType,
        "story": StoryCount,
        "build_style": BuildStyle,
        "color_type": ColorType,
    }

    house_id: Optional[str] = None
    acreage: Optional[Decimal] = Field(default=None, ge=0)
    sewage_type: Optional[SewageTypeChoice] = Known[SewageType](value=SewageType.MUNICIPAL)
    story: Optional[StoryChoice] = None
    build_style: Optional[BuildStyleChoice] = None
    color_type: Optional[ColorTypeChoice] = None
    house_color: Optional[str] = None
    lot_description: Optional[str] = None

    @field_validator("house_color")
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        if value in (None, ""):
            return None
        if not _HEX_COLOR.match(value):
            raise ValueError("house_color must be a #rrggbb hex colour")
        return value.lower()
