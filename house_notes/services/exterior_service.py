"""
Exterior Service.

Record editor for exterior features (structures on the lot) and the
exterior maintenance log.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger
from house_notes.models.enums import FeatureType, MaintenanceType
from house_notes.models.exterior import ExteriorFeature, ExteriorMaintenance
from house_notes.models.service_models import ExteriorOverview, ServiceResult
from house_notes.repositories.exterior_repository import (
    ExteriorFeatureRepository,
    ExteriorMaintenanceRepository,
)
from house_notes.services.base_service import RecordEditorService
from house_notes.services.validation import (
    check_option,
    coerce_record,
    raise_if_errors,
    require_value,
)

FeatureInput = Union[ExteriorFeature, Mapping[str, Any]]
MaintenanceInput = Union[ExteriorMaintenance, Mapping[str, Any]]


def validate_feature(feature: ExteriorFeature, *, require_house: bool = True) -> None:
    errors: dict[str, str] = {}
    if require_house:
        require_value(errors, "house_id", feature.house_id, "House")
    require_value(errors, "feature_type", feature.feature_type, "Feature type")
    check_option(errors, "feature_type", feature.feature_type, FeatureType, "Feature type")
    require_value(errors, "description", feature.description, "Description")
    raise_if_errors(errors)


def validate_maintenance(record: ExteriorMaintenance) -> None:
    errors: dict[str, str] = {}
    require_value(errors, "house_id", record.house_id, "House")
    require_value(errors, "maintenance_type", record.maintenance_type, "Maintenance type")
    check_option(
        errors, "maintenance_type", record.maintenance_type, MaintenanceType, "Maintenance type"
    )
    require_value(errors, "maintenance_date", record.maintenance_date, "Date")
    require_value(errors, "description", record.description, "Description")
    raise_if_errors(errors)


class ExteriorService(RecordEditorService):
    """Exterior features and maintenance of a house."""

    def __init__(
        self,
        db: DatabaseManager,
        feature_repo: ExteriorFeatureRepository,
        maintenance_repo: ExteriorMaintenanceRepository,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(db, logger)
        self._feature_repo = feature_repo
        self._maintenance_repo = maintenance_repo

    def list_exterior(
        self, house_id: str, user_id: str
    ) -> ServiceResult[ExteriorOverview]:
        """Features newest first; maintenance by date, most recent first."""
        try:
            features = self._feature_repo.list_for_owner(house_id, user_id)
            maintenance = self._maintenance_repo.list_active(house_id)
            return ServiceResult(
                success=True,
                data=ExteriorOverview(features=features, maintenance=maintenance),
            )
        except Exception as exc:
            return self._failure(exc, "exterior list")

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def save_feature(
        self,
        data: FeatureInput,
        user_id: str,
        feature_id: Optional[str] = None,
    ) -> ServiceResult[ExteriorFeature]:
        try:
            feature = coerce_record(ExteriorFeature, data)
            validate_feature(feature, require_house=feature_id is None)
            if feature_id is None:
                saved = self._feature_repo.create(feature, user_id)
                action = "CREATE"
            else:
                saved = self._feature_repo.update(feature_id, feature, user_id)
                action = "UPDATE"
            self._audit(
                action, self._feature_repo.TABLE, saved.id, user_id,
                {"build_cost": str(saved.build_cost)},
            )
            return ServiceResult(success=True, data=saved)
        except Exception as exc:
            return self._failure(exc, "feature save")

    def delete_feature(self, feature_id: str, user_id: str) -> ServiceResult[str]:
        try:
            marker = self._feature_repo.soft_delete(feature_id, user_id)
            self._audit("SOFT_DELETE", self._feature_repo.TABLE, feature_id, user_id)
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "feature delete")

    def restore_feature(
        self, feature_id: str, user_id: str
    ) -> ServiceResult[ExteriorFeature]:
        try:
            feature = self._feature_repo.restore(feature_id, user_id)
            self._audit("RESTORE", self._feature_repo.TABLE, feature_id, user_id)
            return ServiceResult(success=True, data=feature)
        except Exception as exc:
            return self._failure(exc, "feature restore")

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def add_maintenance(
        self, data: MaintenanceInput, user_id: str
    ) -> ServiceResult[ExteriorMaintenance]:
        try:
            record = coerce_record(ExteriorMaintenance, data)
            validate_maintenance(record)
            saved = self._maintenance_repo.create(record, user_id)
            self._audit(
                "CREATE", self._maintenance_repo.TABLE, saved.id, user_id,
                {"cost": str(saved.cost)},
            )
            return ServiceResult(success=True, data=saved)
        except Exception as exc:
            return self._failure(exc, "maintenance save")

    def delete_maintenance(self, record_id: str, user_id: str) -> ServiceResult[str]:
        try:
            marker = self._maintenance_repo.soft_delete(record_id, user_id)
            self._audit(
                "SOFT_DELETE", self._maintenance_repo.TABLE, record_id, user_id
            )
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "maintenance delete")

    def restore_maintenance(
        self, record_id: str, user_id: str
    ) -> ServiceResult[ExteriorMaintenance]:
        try:
            record = self._maintenance_repo.restore(record_id, user_id)
            self._audit("RESTORE", self._maintenance_repo.TABLE, record_id, user_id)
            return ServiceResult(success=True, data=record)
        except Exception as exc:
            return self._failure(exc, "maintenance restore")
