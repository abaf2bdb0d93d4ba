"""
Cost Dashboard Service.

Loads a house's cost breakdown, derives its lifecycle figures and renders
every monetary value through the currency formatter for the house's
country.

``DashboardLoader`` runs loads on a background thread for an interactive
consumer.  Only the result of the most recent request is delivered, and
nothing is delivered once the consumer has detached; results of
superseded requests are discarded.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from house_notes.logger import StructuredLogger
from house_notes.models.cost_models import (
    CostBreakdown,
    DashboardLine,
    DashboardSummary,
)
from house_notes.models.house import House
from house_notes.models.service_models import ServiceResult
from house_notes.services.base_service import BaseService
from house_notes.services.cost_aggregator import CostAggregatorService
from house_notes.services.house_lifecycle import compute_lifecycle
from house_notes.utils.currency import format_currency, get_currency_info

# (label, CostBreakdown field) in display order.
BREAKDOWN_LINES: tuple[tuple[str, str], ...] = (
    ("Price Paid", "house_purchase"),
    ("Interior Appliances", "appliances"),
    ("Appliance Installation", "appliance_installation"),
    ("Appliance Repairs", "appliance_repairs"),
    ("Exterior Features", "exterior_features"),
    ("Exterior Maintenance", "exterior_maintenance"),
)


class DashboardService(BaseService):
    """Builds the formatted cost dashboard for one house."""

    def __init__(
        self,
        aggregator: CostAggregatorService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._aggregator = aggregator

    @staticmethod
    def build_summary(
        house: House,
        breakdown: CostBreakdown,
        current_year: Optional[int] = None,
    ) -> DashboardSummary:
        """Format *breakdown* and the derived lifecycle for display.

        Cost per year is shown without decimals; profit is shown as an
        absolute amount labelled "Profit" or "Loss".
        """
        country = house.currency_country
        lifecycle = compute_lifecycle(house, breakdown, current_year)

        def money(amount, **digits) -> str:
            return format_currency(amount, country, **digits)

        lines = [
            DashboardLine(
                label=label,
                amount=getattr(breakdown, field),
                display=money(getattr(breakdown, field)),
            )
            for label, field in BREAKDOWN_LINES
        ]

        profit_label: Optional[str] = None
        profit_display: Optional[str] = None
        if lifecycle.profit is not None:
            profit_label = "Profit" if lifecycle.profit >= 0 else "Loss"
            profit_display = money(abs(lifecycle.profit))

        return DashboardSummary(
            house_id=house.id or "",
            country=house.country_name,
            currency_code=get_currency_info(country).code,
            breakdown=breakdown,
            lifecycle=lifecycle,
            lines=lines,
            total_display=money(breakdown.total_cost),
            years_owned=lifecycle.years_owned,
            cost_per_year_display=(
                money(lifecycle.cost_per_year, max_fraction_digits=0)
                if lifecycle.cost_per_year is not None
                else None
            ),
            profit_label=profit_label,
            profit_display=profit_display,
            price_sold_display=(
                money(house.price_sold) if house.price_sold is not None else None
            ),
        )

    def load_summary(
        self,
        house_id: str,
        user_id: str,
        current_year: Optional[int] = None,
    ) -> ServiceResult[DashboardSummary]:
        """Aggregate and format.  On failure ``data`` is ``None``."""
        try:
            house, breakdown = self._aggregator.aggregate_with_house(house_id, user_id)
            return ServiceResult(
                success=True,
                data=self.build_summary(house, breakdown, current_year),
            )
        except Exception as exc:
            return self._failure(exc, "dashboard load")


class DashboardLoader:
    """Background loader that drops stale results.

    Each :meth:`request` supersedes the previous one.  A finished load is
    passed to ``on_result`` only while it is still the latest request and
    the loader is attached; :meth:`cancel` and :meth:`detach` invalidate
    in-flight loads.

    Parameters
    ----------
    service:
        The dashboard service performing the load.
    on_result:
        Callback receiving each delivered ``ServiceResult``.  Invoked on
        the loader thread while the loader's lock is held, so it must not
        block.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        service: DashboardService,
        on_result: Callable[[ServiceResult[DashboardSummary]], None],
        logger: StructuredLogger,
    ) -> None:
        self._service = service
        self._on_result = on_result
        self._logger = logger
        self._lock: threading.RLock = threading.RLock()
        self._generation: int = 0
        self._attached: bool = True
        self._thread: Optional[threading.Thread] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def is_attached(self) -> bool:
        with self._lock:
            return self._attached

    def request(
        self,
        house_id: str,
        user_id: str,
        current_year: Optional[int] = None,
    ) -> int:
        """Start loading *house_id*; returns the request's generation.

        Raises:
            RuntimeError: The loader has been detached.
        """
        with self._lock:
            if not self._attached:
                raise RuntimeError("DashboardLoader is detached.")
            self._generation += 1
            generation = self._generation
            self._thread = threading.Thread(
                target=self._load,
                args=(generation, house_id, user_id, current_year),
                name=f"DashboardLoad-{generation}",
                daemon=True,
            )
            thread = self._thread
        thread.start()
        return generation

    def cancel(self) -> None:
        """Discard the result of any in-flight load (e.g. no house selected)."""
        with self._lock:
            self._generation += 1

    def detach(self) -> None:
        """The consumer is gone: nothing is delivered from now on."""
        with self._lock:
            self._attached = False
            self._generation += 1

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the latest load thread finishes.

        Returns ``False`` if it is still running after *timeout*.
        """
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _load(
        self,
        generation: int,
        house_id: str,
        user_id: str,
        current_year: Optional[int],
    ) -> None:
        result = self._service.load_summary(house_id, user_id, current_year)
        with self._lock:
            if not self._attached or generation != self._generation:
                self._logger.debug(
                    "Discarding stale dashboard result for house %s (request %d)",
                    house_id,
                    generation,
                )
                return
            try:
                self._on_result(result)
            except Exception as exc:
                self._logger.error(
                    "Dashboard result callback failed: %s", exc, exc_info=True,
                )
