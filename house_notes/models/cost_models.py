"""
Cost Aggregation Models.

``CostBreakdown`` is derived on demand from a house's active child rows and
is never persisted.  ``HouseLifecycle`` holds the figures computed from a
breakdown plus the house's purchase and sale fields.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field

__all__ = [
    "CostBreakdown",
    "DashboardLine",
    "DashboardSummary",
    "HouseLifecycle",
]


class CostBreakdown(BaseModel):
    """Aggregate of all cost-bearing records for one house."""

    house_purchase: Decimal = Decimal("0")
    appliances: Decimal = Decimal("0")
    appliance_installation: Decimal = Decimal("0")
    appliance_repairs: Decimal = Decimal("0")
    exterior_features: Decimal = Decimal("0")
    exterior_maintenance: Decimal = Decimal("0")

    model_config = {"frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_cost(self) -> Decimal:
        return (
            self.house_purchase
            + self.appliances
            + self.appliance_installation
            + self.appliance_repairs
            + self.exterior_features
            + self.exterior_maintenance
        )


class HouseLifecycle(BaseModel):
    """Ownership figures derived from a house and its breakdown.

    Each field is ``None`` when it is undefined, never zero:
    ``profit`` without a sale price, ``years_owned`` without a purchase
    year, ``cost_per_year`` unless ``years_owned > 0``.
    """

    years_owned: Optional[int] = None
    profit: Optional[Decimal] = None
    cost_per_year: Optional[Decimal] = None

    model_config = {"frozen": True}


class DashboardLine(BaseModel):
    """One rendered row of the cost dashboard."""

    label: str
    amount: Decimal
    display: str


class DashboardSummary(BaseModel):
    """Everything the cost dashboard shows, already formatted."""

    house_id: str
    country: Optional[str] = None
    currency_code: str
    breakdown: CostBreakdown
    lifecycle: HouseLifecycle
    lines: list[DashboardLine] = Field(default_factory=list)
    total_display: str
    years_owned: Optional[int] = None
    cost_per_year_display: Optional[str] = None
    profit_label: Optional[str] = None
    profit_display: Optional[str] = None
    price_sold_display: Optional[str] = None
