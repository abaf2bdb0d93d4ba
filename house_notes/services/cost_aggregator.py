"""
Cost Aggregator Service.

Reduces a house's purchase price and every active cost-bearing child row
into a ``CostBreakdown``.

Reads are a two-phase fan-out:

    phase 1 (parallel): house, appliances, exterior features, maintenance
    phase 2 (gated on phase 1's appliance ids): repairs

With no active appliances the repair lookup is skipped entirely.  No lock
or transaction is taken; the breakdown reflects whatever was committed
when each read ran.  Any failed read fails the whole aggregation: a
partial breakdown is never returned.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from house_notes.logger import StructuredLogger
from house_notes.models.appliance import Appliance, Repair
from house_notes.models.cost_models import CostBreakdown
from house_notes.models.exterior import ExteriorFeature, ExteriorMaintenance
from house_notes.models.house import House
from house_notes.models.service_models import ServiceResult
from house_notes.repositories.appliance_repository import (
    ApplianceRepository,
    RepairRepository,
)
from house_notes.repositories.exterior_repository import (
    ExteriorFeatureRepository,
    ExteriorMaintenanceRepository,
)
from house_notes.repositories.house_repository import HouseRepository
from house_notes.services.base_service import BaseService

_ZERO = Decimal("0")


def _sum(values: Iterable[Optional[Decimal]]) -> Decimal:
    return sum((value if value is not None else _ZERO for value in values), _ZERO)


def build_breakdown(
    house: House,
    appliances: Sequence[Appliance],
    repairs: Sequence[Repair],
    features: Sequence[ExteriorFeature],
    maintenance: Sequence[ExteriorMaintenance],
) -> CostBreakdown:
    """Pure reduction over already-fetched active rows.

    Absent costs count as zero.
    """
    return CostBreakdown(
        house_purchase=house.price_paid if house.price_paid is not None else _ZERO,
        appliances=_sum(a.purchase_cost for a in appliances),
        appliance_installation=_sum(a.installation_cost for a in appliances),
        appliance_repairs=_sum(r.repair_cost for r in repairs),
        exterior_features=_sum(f.build_cost for f in features),
        exterior_maintenance=_sum(m.cost for m in maintenance),
    )


class CostAggregatorService(BaseService):
    """Loads and aggregates the cost records of one house."""

    def __init__(
        self,
        house_repo: HouseRepository,
        appliance_repo: ApplianceRepository,
        repair_repo: RepairRepository,
        feature_repo: ExteriorFeatureRepository,
        maintenance_repo: ExteriorMaintenanceRepository,
        logger: StructuredLogger,
        max_workers: int = 4,
    ) -> None:
        super().__init__(logger)
        self._house_repo = house_repo
        self._appliance_repo = appliance_repo
        self._repair_repo = repair_repo
        self._feature_repo = feature_repo
        self._maintenance_repo = maintenance_repo
        self._max_workers = max_workers

    def aggregate_with_house(
        self, house_id: str, user_id: str
    ) -> tuple[House, CostBreakdown]:
        """Fetch everything for *house_id* and reduce it.

        Raises:
            RecordNotFoundError: The house is missing or soft-deleted.
            AuthorizationError: The house belongs to another user.
            RetrievalError: Any read failed.
        """
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="cost-agg"
        ) as pool:
            house_future = pool.submit(self._house_repo.get_owned, house_id, user_id)
            appliances_future = pool.submit(self._appliance_repo.list_active, house_id)
            features_future = pool.submit(self._feature_repo.list_active, house_id)
            maintenance_future = pool.submit(self._maintenance_repo.list_active, house_id)

            house = house_future.result()
            appliances = appliances_future.result()
            features = features_future.result()
            maintenance = maintenance_future.result()

        appliance_ids = [a.id for a in appliances if a.id]
        repairs = (
            self._repair_repo.list_active_for_appliances(appliance_ids)
            if appliance_ids
            else []
        )

        breakdown = build_breakdown(house, appliances, repairs, features, maintenance)
        self._logger.bind(house_id=house_id, user_id=user_id).info(
            "Aggregated costs",
            extra={
                "event": "COST_AGGREGATE",
                "appliances": len(appliances),
                "repairs": len(repairs),
                "features": len(features),
                "maintenance": len(maintenance),
            },
        )
        return house, breakdown

    def aggregate(self, house_id: str, user_id: str) -> CostBreakdown:
        return self.aggregate_with_house(house_id, user_id)[1]

    def get_cost_breakdown(
        self, house_id: str, user_id: str
    ) -> ServiceResult[CostBreakdown]:
        """Service-boundary wrapper; ``data`` is ``None`` on any failure."""
        try:
            return ServiceResult(success=True, data=self.aggregate(house_id, user_id))
        except Exception as exc:
            return self._failure(exc, "cost aggregation")
