"""
Appliance Service.

Record editor for interior appliances together with their repair history
and attachments.

    save_appliance  -> create/update the appliance, then insert staged uploads
    trash_appliance -> soft delete, cascading to active repairs/attachments
    delete_appliance-> permanent delete (server-side cascade)
"""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping, Optional, Sequence, Union

from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger
from house_notes.models.appliance import Appliance, Attachment, Repair
from house_notes.models.enums import ApplianceType
from house_notes.models.service_models import (
    ApplianceRecord,
    AttachmentUpload,
    ServiceResult,
)
from house_notes.repositories.appliance_repository import (
    ApplianceRepository,
    AttachmentRepository,
    RepairRepository,
)
from house_notes.services.attachment_service import AttachmentService
from house_notes.services.base_service import RecordEditorService
from house_notes.services.validation import (
    check_option,
    coerce_record,
    raise_if_errors,
    require_value,
)

ApplianceInput = Union[Appliance, Mapping[str, Any]]
RepairInput = Union[Repair, Mapping[str, Any]]


def validate_appliance(appliance: Appliance, *, require_house: bool = True) -> None:
    errors: dict[str, str] = {}
    if require_house:
        require_value(errors, "house_id", appliance.house_id, "House")
    require_value(errors, "appliance_type", appliance.appliance_type, "Appliance type")
    check_option(
        errors, "appliance_type", appliance.appliance_type, ApplianceType, "Appliance type"
    )
    raise_if_errors(errors)


def validate_repair(repair: Repair) -> None:
    errors: dict[str, str] = {}
    require_value(errors, "appliance_id", repair.appliance_id, "Appliance")
    require_value(errors, "repair_date", repair.repair_date, "Repair date")
    require_value(errors, "description", repair.description, "Description")
    raise_if_errors(errors)


class ApplianceService(RecordEditorService):
    """Appliances, repairs and attachments of a house.

    Parameters
    ----------
    db:
        Database manager (audit persistence).
    appliance_repo, repair_repo, attachment_repo:
        Data access for the three tables.
    attachment_service:
        Enforces the attachment count cap before uploads are inserted.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        db: DatabaseManager,
        appliance_repo: ApplianceRepository,
        repair_repo: RepairRepository,
        attachment_repo: AttachmentRepository,
        attachment_service: AttachmentService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(db, logger)
        self._appliance_repo = appliance_repo
        self._repair_repo = repair_repo
        self._attachment_repo = attachment_repo
        self._attachments = attachment_service

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_appliances(
        self, house_id: str, user_id: str
    ) -> ServiceResult[list[ApplianceRecord]]:
        """Active appliances, newest first, each with repairs and attachments."""
        try:
            appliances = self._appliance_repo.list_for_owner(house_id, user_id)
            ids = [a.id for a in appliances if a.id]
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="appliance") as pool:
                repairs_future = pool.submit(
                    self._repair_repo.list_active_for_appliances, ids
                )
                attachments_future = pool.submit(
                    self._attachment_repo.list_active_for_appliances, ids
                )
                repairs = repairs_future.result()
                attachments = attachments_future.result()

            repairs_by_appliance: dict[str, list[Repair]] = defaultdict(list)
            for repair in repairs:
                repairs_by_appliance[repair.appliance_id or ""].append(repair)
            attachments_by_appliance: dict[str, list[Attachment]] = defaultdict(list)
            for attachment in attachments:
                attachments_by_appliance[attachment.appliance_id or ""].append(attachment)

            records = [
                ApplianceRecord(
                    appliance=appliance,
                    repairs=repairs_by_appliance.get(appliance.id or "", []),
                    attachments=attachments_by_appliance.get(appliance.id or "", []),
                )
                for appliance in appliances
            ]
            return ServiceResult(success=True, data=records)
        except Exception as exc:
            return self._failure(exc, "appliance list")

    # ------------------------------------------------------------------
    # Appliances
    # ------------------------------------------------------------------

    def save_appliance(
        self,
        data: ApplianceInput,
        user_id: str,
        appliance_id: Optional[str] = None,
        uploads: Sequence[AttachmentUpload] = (),
    ) -> ServiceResult[ApplianceRecord]:
        """Create (no *appliance_id*) or update an appliance.

        Staged *uploads* are inserted after the appliance is saved.  The
        attachment cap is checked first so a rejected batch leaves the
        appliance untouched.
        """
        try:
            appliance = coerce_record(Appliance, data)
            validate_appliance(appliance, require_house=appliance_id is None)

            existing_attachments: list[Attachment] = []
            if appliance_id is not None:
                existing_attachments = self._attachment_repo.list_active(appliance_id)
            if uploads:
                self._attachments.check_count(len(existing_attachments), len(uploads))

            if appliance_id is None:
                saved = self._appliance_repo.create(appliance, user_id)
                action = "CREATE"
            else:
                saved = self._appliance_repo.update(appliance_id, appliance, user_id)
                action = "UPDATE"
            self._audit(
                action, self._appliance_repo.TABLE, saved.id, user_id,
                {"uploads": len(uploads)},
            )

            added: list[Attachment] = []
            if uploads and saved.id:
                added = self._attachment_repo.create_batch(
                    saved.id,
                    [Attachment(**upload.model_dump()) for upload in uploads],
                    user_id,
                )
                for attachment in added:
                    self._audit(
                        "CREATE", self._attachment_repo.TABLE, attachment.id, user_id,
                        {"file_name": attachment.file_name},
                    )

            repairs = (
                self._repair_repo.list_active(saved.id)
                if appliance_id is not None and saved.id
                else []
            )
            return ServiceResult(
                success=True,
                data=ApplianceRecord(
                    appliance=saved,
                    repairs=repairs,
                    attachments=existing_attachments + added,
                ),
            )
        except Exception as exc:
            return self._failure(exc, "appliance save")

    def delete_appliance(self, appliance_id: str, user_id: str) -> ServiceResult[None]:
        """Permanently delete the appliance with its repairs and attachments."""
        try:
            self._appliance_repo.permanent_delete(appliance_id, user_id)
            self._audit(
                "PERMANENT_DELETE", self._appliance_repo.TABLE, appliance_id, user_id
            )
            return ServiceResult(success=True)
        except Exception as exc:
            return self._failure(exc, "appliance delete")

    def trash_appliance(self, appliance_id: str, user_id: str) -> ServiceResult[str]:
        """Soft delete with cascade; ``data`` is the shared deletion marker."""
        try:
            marker = self._appliance_repo.soft_delete(appliance_id, user_id)
            self._audit(
                "SOFT_DELETE", self._appliance_repo.TABLE, appliance_id, user_id,
                {"deleted_at": marker},
            )
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "appliance delete")

    def restore_appliance(
        self, appliance_id: str, user_id: str
    ) -> ServiceResult[Appliance]:
        try:
            appliance = self._appliance_repo.restore(appliance_id, user_id)
            self._audit("RESTORE", self._appliance_repo.TABLE, appliance_id, user_id)
            return ServiceResult(success=True, data=appliance)
        except Exception as exc:
            return self._failure(exc, "appliance restore")

    # ------------------------------------------------------------------
    # Repairs and attachments
    # ------------------------------------------------------------------

    def add_repair(self, data: RepairInput, user_id: str) -> ServiceResult[Repair]:
        try:
            repair = coerce_record(Repair, data)
            validate_repair(repair)
            saved = self._repair_repo.create(repair, user_id)
            self._audit(
                "CREATE", self._repair_repo.TABLE, saved.id, user_id,
                {"appliance_id": saved.appliance_id, "repair_cost": str(saved.repair_cost)},
            )
            return ServiceResult(success=True, data=saved)
        except Exception as exc:
            return self._failure(exc, "repair save")

    def delete_repair(self, repair_id: str, user_id: str) -> ServiceResult[str]:
        try:
            marker = self._repair_repo.soft_delete(repair_id, user_id)
            self._audit("SOFT_DELETE", self._repair_repo.TABLE, repair_id, user_id)
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "repair delete")

    def delete_attachment(self, attachment_id: str, user_id: str) -> ServiceResult[str]:
        try:
            marker = self._attachment_repo.soft_delete(attachment_id, user_id)
            self._audit(
                "SOFT_DELETE", self._attachment_repo.TABLE, attachment_id, user_id
            )
            return ServiceResult(success=True, data=marker)
        except Exception as exc:
            return self._failure(exc, "attachment delete")
