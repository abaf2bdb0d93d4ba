"""
Exterior Feature and Maintenance Repositories.
"""

from __future__ import annotations

from house_notes.models.exterior import ExteriorFeature, ExteriorMaintenance
from house_notes.repositories.base_repository import HouseChildRepository


class ExteriorFeatureRepository(HouseChildRepository[ExteriorFeature]):
    """Features are listed newest first."""

    TABLE = "exterior_features"
    MODEL = ExteriorFeature
    ORDER_BY = ("created_at", True)


class ExteriorMaintenanceRepository(HouseChildRepository[ExteriorMaintenance]):
    """Maintenance history is listed by date, most recent first."""

    TABLE = "exterior_maintenance"
    MODEL = ExteriorMaintenance
    ORDER_BY = ("maintenance_date", True)
