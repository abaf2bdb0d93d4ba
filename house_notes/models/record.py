"""
Persisted Record Base.

Common fields and storage-boundary mapping shared by every row model that
lives in the hosted store.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, model_validator

from house_notes.models.choices import fold_choice_columns, unfold_choice_columns
from house_notes.models.enums import RecordState

_SERVER_MANAGED: frozenset[str] = frozenset(
    {"id", "created_at", "updated_at", "deleted_at"}
)


def coalesce_cost(value: object) -> object:
    """Treat an absent cost as zero so it never propagates into a sum."""
    if value is None or value == "":
        return Decimal("0")
    return value


class Record(BaseModel):
    """A row in one of the hosted tables.

    Subclasses list their selector-with-Other columns in ``choice_fields``;
    the ``(value, value_other)`` pair is folded into a choice on the way in
    and flattened again by :meth:`to_row`.
    """

    choice_fields: ClassVar[dict[str, type[StrEnum]]] = {}

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _fold_choices(cls, data: Any) -> Any:
        for field, enum_cls in cls.choice_fields.items():
            data = fold_choice_columns(data, field, enum_cls)
        return data

    @property
    def state(self) -> RecordState:
        """``Deleted`` once a deletion timestamp is set, else ``Active``."""
        return RecordState.ACTIVE if self.deleted_at is None else RecordState.DELETED

    def to_row(self, exclude: Optional[set[str]] = None) -> dict[str, Any]:
        """JSON-safe column dict for insert/update.

        Server-managed columns (``id`` and timestamps) are never written.
        """
        row: dict[str, Any] = self.model_dump(
            mode="json",
            exclude=set(_SERVER_MANAGED) | set(exclude or ()),
        )
        for field in self.choice_fields:
            if field in row:
                unfold_choice_columns(row, field)
        return row
