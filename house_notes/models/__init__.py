"""
Data Models Package.

Re-exports the Pydantic models for short imports:
    from house_notes.models import House, Room, Appliance, CostBreakdown
    from house_notes.models import Known, Other, RoomTypeName
"""

from __future__ import annotations

from house_notes.models.appliance import Appliance, Attachment, Repair
from house_notes.models.choices import Known, Other, choice_label
from house_notes.models.cost_models import (
    CostBreakdown,
    DashboardLine,
    DashboardSummary,
    HouseLifecycle,
)
from house_notes.models.enums import (
    ApplianceType,
    BuildStyle,
    ColorType,
    Country,
    FeatureType,
    MaintenanceType,
    RecordState,
    RoomTypeName,
    SewageType,
    StoryCount,
)
from house_notes.models.exterior import ExteriorFeature, ExteriorMaintenance
from house_notes.models.house import House, PropertyDetails
from house_notes.models.room import BasementDetails, GarageDetails, Room
from house_notes.models.service_models import ServiceResult
from house_notes.models.user import User

__all__ = [
    "Appliance",
    "ApplianceType",
    "Attachment",
    "BasementDetails",
    "BuildStyle",
    "ColorType",
    "CostBreakdown",
    "Country",
    "DashboardLine",
    "DashboardSummary",
    "ExteriorFeature",
    "ExteriorMaintenance",
    "FeatureType",
    "GarageDetails",
    "House",
    "HouseLifecycle",
    "Known",
    "MaintenanceType",
    "Other",
    "PropertyDetails",
    "RecordState",
    "Repair",
    "Room",
    "RoomTypeName",
    "ServiceResult",
    "SewageType",
    "StoryCount",
    "User",
    "choice_label",
]
