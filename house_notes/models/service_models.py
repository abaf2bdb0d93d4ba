"""
Service Layer Data Transfer Objects.

Pydantic models for validated input/output at service boundaries.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from house_notes.models.appliance import Appliance, Attachment, Repair
from house_notes.models.exterior import ExteriorFeature, ExteriorMaintenance
from house_notes.models.house import House, PropertyDetails
from house_notes.models.room import Room

T = TypeVar("T")

__all__ = [
    "ApplianceRecord",
    "AttachmentUpload",
    "ExteriorOverview",
    "HouseDetails",
    "ServiceResult",
    "UploadBatch",
]


# ---------------------------------------------------------------------------
# Read aggregates
# ---------------------------------------------------------------------------

class HouseDetails(BaseModel):
    """A house with its rooms and property details."""

    house: House
    rooms: list[Room] = Field(default_factory=list)
    property_details: Optional[PropertyDetails] = None


class ApplianceRecord(BaseModel):
    """An appliance together with its active repairs and attachments."""

    appliance: Appliance
    repairs: list[Repair] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)


class ExteriorOverview(BaseModel):
    """Exterior features and maintenance history of one house."""

    features: list[ExteriorFeature] = Field(default_factory=list)
    maintenance: list[ExteriorMaintenance] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Attachment uploads
# ---------------------------------------------------------------------------

class AttachmentUpload(BaseModel):
    """A file prepared for storage as an inline data URI."""

    file_name: str
    file_url: str
    file_type: str = "application/octet-stream"
    file_size: int = Field(ge=0)
    description: Optional[str] = None


class UploadBatch(BaseModel):
    """Accepted uploads plus one message per file that was skipped."""

    accepted: list[AttachmentUpload] = Field(default_factory=list)
    rejected: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Generic service models
# ---------------------------------------------------------------------------

class ServiceResult(BaseModel, Generic[T]):
    """
    Standard service return envelope.

    All service methods return this, providing a consistent contract for
    the command layer.  On failure ``data`` is ``None``; a failed read is
    never reported as an empty or zero result.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int = 200
    field_errors: dict[str, str] = Field(default_factory=dict)
