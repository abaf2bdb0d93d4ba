"""
House Lifecycle Calculator.

Derives ownership figures from a house's purchase/sale fields and its
aggregated total cost.  Undefined figures are ``None``, never zero.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from house_notes.models.cost_models import CostBreakdown, HouseLifecycle
from house_notes.models.house import House


def years_owned(
    year_bought: Optional[int],
    year_sold: Optional[int],
    current_year: int,
) -> Optional[int]:
    """Sale year minus purchase year; purchase year to *current_year* while
    still owned; ``None`` without a purchase year."""
    if year_bought is None:
        return None
    if year_sold is not None:
        return year_sold - year_bought
    return current_year - year_bought


def compute_lifecycle(
    house: House,
    breakdown: CostBreakdown,
    current_year: Optional[int] = None,
) -> HouseLifecycle:
    """Compute profit, years owned and cost per year.

    Args:
        house: Source of purchase/sale years and sale price.
        breakdown: Aggregated costs; only ``total_cost`` is used.
        current_year: Calendar year used while the house is still owned.
            Defaults to today's year.

    ``profit`` exists only when a sale price is recorded (a sale price of
    0 counts) and may be negative.  ``cost_per_year`` exists only when
    ``years_owned`` is strictly positive.
    """
    year = current_year if current_year is not None else date.today().year
    total = breakdown.total_cost

    owned = years_owned(house.year_bought, house.year_sold, year)
    profit: Optional[Decimal] = (
        house.price_sold - total if house.price_sold is not None else None
    )
    per_year: Optional[Decimal] = (
        total / Decimal(owned) if owned is not None and owned > 0 else None
    )
    return HouseLifecycle(years_owned=owned, profit=profit, cost_per_year=per_year)
