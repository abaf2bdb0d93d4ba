"""
Repository Layer.

One repository per hosted table.  Repositories raise the application's
exception taxonomy; services translate it into ``ServiceResult``.
"""

from house_notes.repositories.appliance_repository import (
    ApplianceRepository,
    AttachmentRepository,
    RepairRepository,
)
from house_notes.repositories.base_repository import BaseRepository
from house_notes.repositories.exterior_repository import (
    ExteriorFeatureRepository,
    ExteriorMaintenanceRepository,
)
from house_notes.repositories.house_repository import HouseRepository
from house_notes.repositories.room_repository import RoomRepository

__all__ = [
    "ApplianceRepository",
    "AttachmentRepository",
    "BaseRepository",
    "ExteriorFeatureRepository",
    "ExteriorMaintenanceRepository",
    "HouseRepository",
    "RepairRepository",
    "RoomRepository",
]
