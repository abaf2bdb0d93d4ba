"""
Attachment Staging Service.

Turns local files (or raw bytes) into inline ``data:`` URI uploads for
appliance attachments.  Limits are enforced before anything is sent to
the hosted store:

1. **Count cap**: existing + new files may not exceed
   ``ATTACHMENT_MAX_FILES``; otherwise the whole batch is rejected.
2. **Size cap**: a file larger than ``ATTACHMENT_MAX_SIZE_MB`` is skipped
   with a message; the rest of the batch is still accepted.
"""

from __future__ import annotations

import base64
import math
import mimetypes
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

from house_notes.config import AppConfig
from house_notes.errors import AttachmentLimitError
from house_notes.logger import StructuredLogger
from house_notes.models.service_models import AttachmentUpload, UploadBatch
from house_notes.services.base_service import BaseService

DEFAULT_MIME_TYPE: str = "application/octet-stream"

_SIZE_UNITS: tuple[str, ...] = ("Bytes", "KB", "MB")


class FileInput(NamedTuple):
    """In-memory file content awaiting upload."""

    name: str
    data: bytes
    mime_type: Optional[str] = None


FileSource = Union[str, Path, FileInput]


def guess_mime_type(file_name: str) -> str:
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or DEFAULT_MIME_TYPE


def to_data_uri(data: bytes, mime_type: str) -> str:
    """``data:<mime>;base64,<payload>``"""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def format_file_size(size: int) -> str:
    """Human-readable size with up to two decimals.

    ``0`` renders as ``"0 Bytes"``, ``1536`` as ``"1.5 KB"``.
    """
    if size <= 0:
        return "0 Bytes"
    k = 1024
    exponent = min(int(math.floor(math.log(size, k))), len(_SIZE_UNITS) - 1)
    value = (Decimal(size) / Decimal(k ** exponent)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    return f"{format(value.normalize(), 'f')} {_SIZE_UNITS[exponent]}"


class AttachmentService(BaseService):
    """Stages attachment uploads within the configured caps.

    Parameters
    ----------
    config:
        Supplies ``ATTACHMENT_MAX_FILES`` and ``ATTACHMENT_MAX_SIZE_MB``.
    logger:
        Structured logger instance.
    """

    def __init__(self, config: AppConfig, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._max_files: int = config.ATTACHMENT_MAX_FILES
        self._max_size_mb: int = config.ATTACHMENT_MAX_SIZE_MB
        self._max_bytes: int = config.attachment_max_bytes

    @property
    def max_files(self) -> int:
        return self._max_files

    def check_count(self, existing_count: int, new_count: int) -> None:
        """Raises ``AttachmentLimitError`` when the batch would exceed the cap."""
        if existing_count + new_count > self._max_files:
            raise AttachmentLimitError(f"Maximum {self._max_files} files allowed")

    def prepare_uploads(
        self,
        files: Sequence[FileSource],
        existing_count: int = 0,
        description: Optional[str] = None,
    ) -> UploadBatch:
        """Encode *files* as data URIs.

        Raises
        ------
        AttachmentLimitError
            ``existing_count + len(files)`` exceeds the file cap.  Nothing
            is read in that case.
        """
        self.check_count(existing_count, len(files))

        batch = UploadBatch()
        for source in files:
            if isinstance(source, FileInput):
                upload, problem = self._from_bytes(source, description)
            else:
                upload, problem = self._from_path(Path(source), description)
            if upload is not None:
                batch.accepted.append(upload)
            if problem is not None:
                batch.rejected.append(problem)

        if batch.rejected:
            self._logger.warning(
                "Skipped %d of %d attachment(s)",
                len(batch.rejected),
                len(files),
                extra={"event": "ATTACHMENT_SKIPPED", "rejected": batch.rejected},
            )
        return batch

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _too_large(self, name: str) -> str:
        return f"File {name} exceeds {self._max_size_mb}MB limit"

    def _from_path(
        self, path: Path, description: Optional[str]
    ) -> tuple[Optional[AttachmentUpload], Optional[str]]:
        try:
            size = path.stat().st_size
            if size > self._max_bytes:
                return None, self._too_large(path.name)
            data = path.read_bytes()
        except OSError as exc:
            self._logger.warning("Could not read attachment %s: %s", path, exc)
            return None, f"Failed to upload {path.name}"
        return self._from_bytes(
            FileInput(name=path.name, data=data), description
        )

    def _from_bytes(
        self, item: FileInput, description: Optional[str]
    ) -> tuple[Optional[AttachmentUpload], Optional[str]]:
        if len(item.data) > self._max_bytes:
            return None, self._too_large(item.name)
        mime_type = item.mime_type or guess_mime_type(item.name)
        return (
            AttachmentUpload(
                file_name=item.name,
                file_url=to_data_uri(item.data, mime_type),
                file_type=mime_type,
                file_size=len(item.data),
                description=description,
            ),
            None,
        )
