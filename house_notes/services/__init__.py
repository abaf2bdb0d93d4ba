"""
Business Logic Services Package.

Services depend on the Repository layer for data access and on the
session for user context.

The ``create_services()`` factory wires every repository and service together,
returning a typed dict that the application layer (commands) can consume
without knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from house_notes.auth import SessionManager
from house_notes.config import AppConfig
from house_notes.database import DatabaseManager
from house_notes.logger import get_logger
from house_notes.repositories.appliance_repository import (
    ApplianceRepository,
    AttachmentRepository,
    RepairRepository,
)
from house_notes.repositories.exterior_repository import (
    ExteriorFeatureRepository,
    ExteriorMaintenanceRepository,
)
from house_notes.repositories.house_repository import HouseRepository
from house_notes.repositories.room_repository import RoomRepository
from house_notes.services.app_settings_service import AppSettingsService
from house_notes.services.appliance_service import ApplianceService
from house_notes.services.attachment_service import AttachmentService
from house_notes.services.auth_service import AuthService
from house_notes.services.cost_aggregator import CostAggregatorService
from house_notes.services.dashboard_service import DashboardService
from house_notes.services.exterior_service import ExteriorService
from house_notes.services.house_service import HouseService
from house_notes.services.room_service import RoomService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    # --- Account ---
    auth_service: AuthService

    # --- Record editors ---
    house_service: HouseService
    room_service: RoomService
    appliance_service: ApplianceService
    exterior_service: ExteriorService
    attachment_service: AttachmentService

    # --- Costs ---
    cost_aggregator: CostAggregatorService
    dashboard_service: DashboardService

    # --- Infrastructure ---
    app_settings_service: AppSettingsService


def create_services(
    db: DatabaseManager,
    config: AppConfig,
    session: SessionManager,
) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    application entry-point calls this once at startup and passes the
    returned dict to commands as needed.

    Args:
        db: Initialised DatabaseManager with Supabase + SQLite ready.
        config: Application configuration (injected into services that need it).
        session: Shared session holder for the signed-in user.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = get_logger("services")

    # ------------------------------------------------------------------
    # 1. Repositories (data-access layer)
    # ------------------------------------------------------------------
    house_repo = HouseRepository(db=db, logger=logger)
    room_repo = RoomRepository(db=db, logger=logger)
    appliance_repo = ApplianceRepository(db=db, logger=logger)
    repair_repo = RepairRepository(db=db, logger=logger)
    attachment_repo = AttachmentRepository(db=db, logger=logger)
    feature_repo = ExteriorFeatureRepository(db=db, logger=logger)
    maintenance_repo = ExteriorMaintenanceRepository(db=db, logger=logger)

    # ------------------------------------------------------------------
    # 2. Leaf services (no service dependencies)
    # ------------------------------------------------------------------
    auth_service = AuthService(
        db=db,
        session=session,
        logger=logger,
        min_password_length=config.MIN_PASSWORD_LENGTH,
    )
    attachment_service = AttachmentService(config=config, logger=logger)
    house_service = HouseService(
        db=db,
        house_repo=house_repo,
        room_repo=room_repo,
        logger=logger,
    )
    room_service = RoomService(db=db, room_repo=room_repo, logger=logger)
    exterior_service = ExteriorService(
        db=db,
        feature_repo=feature_repo,
        maintenance_repo=maintenance_repo,
        logger=logger,
    )
    cost_aggregator = CostAggregatorService(
        house_repo=house_repo,
        appliance_repo=appliance_repo,
        repair_repo=repair_repo,
        feature_repo=feature_repo,
        maintenance_repo=maintenance_repo,
        logger=logger,
        max_workers=config.AGGREGATION_MAX_WORKERS,
    )

    # ------------------------------------------------------------------
    # 3. Orchestration services (depend on other services)
    # ------------------------------------------------------------------
    appliance_service = ApplianceService(
        db=db,
        appliance_repo=appliance_repo,
        repair_repo=repair_repo,
        attachment_repo=attachment_repo,
        attachment_service=attachment_service,
        logger=logger,
    )
    dashboard_service = DashboardService(aggregator=cost_aggregator, logger=logger)

    # ------------------------------------------------------------------
    # 4. Infrastructure: persistent app settings
    # ------------------------------------------------------------------
    app_settings_service = AppSettingsService(db=db, logger=logger)

    return ServiceContainer(
        auth_service=auth_service,
        house_service=house_service,
        room_service=room_service,
        appliance_service=appliance_service,
        exterior_service=exterior_service,
        attachment_service=attachment_service,
        cost_aggregator=cost_aggregator,
        dashboard_service=dashboard_service,
        app_settings_service=app_settings_service,
    )
