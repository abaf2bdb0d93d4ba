"""
Selector-with-Other Choices.

A selector whose "Other" entry unlocks a free-text field is modelled as a
tagged union instead of a nullable ``(value, value_other)`` column pair::

    Choice = Known(value) | Other(text)

The column pair exists only at the storage boundary:
:func:`fold_choice_columns` turns a raw row into the union before model
validation, and :func:`unfold_choice_columns` flattens it back when a
model is written.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field

from house_notes.models.enums import (
    OTHER,
    BuildStyle,
    ColorType,
    Country,
    RoomTypeName,
    SewageType,
    StoryCount,
)

E = TypeVar("E", bound=StrEnum)

__all__ = [
    "BuildStyleChoice",
    "ColorTypeChoice",
    "CountryChoice",
    "Known",
    "Other",
    "RoomTypeChoice",
    "SewageTypeChoice",
    "StoryChoice",
    "choice_from_columns",
    "choice_label",
    "fold_choice_columns",
    "unfold_choice_columns",
]


class Known(BaseModel, Generic[E]):
    """One of the selector's predefined values."""

    kind: Literal["known"] = "known"
    value: E

    model_config = {"frozen": True}


class Other(BaseModel):
    """The "Other" entry together with its free text.

    ``text`` may be empty on rows written before the text was required;
    services reject an empty text on save.
    """

    kind: Literal["other"] = "other"
    text: str = ""

    model_config = {"frozen": True}


RoomTypeChoice = Annotated[Union[Known[RoomTypeName], Other], Field(discriminator="kind")]
CountryChoice = Annotated[Union[Known[Country], Other], Field(discriminator="kind")]
SewageTypeChoice = Annotated[Union[Known[SewageType], Other], Field(discriminator="kind")]
StoryChoice = Annotated[Union[Known[StoryCount], Other], Field(discriminator="kind")]
BuildStyleChoice = Annotated[Union[Known[BuildStyle], Other], Field(discriminator="kind")]
ColorTypeChoice = Annotated[Union[Known[ColorType], Other], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Storage boundary helpers
# ---------------------------------------------------------------------------

def choice_from_columns(
    value: Optional[str],
    other_text: Optional[str],
    enum_cls: type[E],
) -> Union[Known[E], Other, None]:
    """Build a choice from the stored ``(value, value_other)`` pair.

    An empty selector yields ``None``.  A value outside *enum_cls* (left
    behind by an older option list) is kept as free text rather than
    rejected.
    """
    if value is None or value == "":
        return None
    if value == OTHER:
        return Other(text=(other_text or "").strip())
    try:
        return Known[enum_cls](value=enum_cls(value))
    except ValueError:
        return Other(text=value)


def choice_label(choice: Union[Known[Any], Other, None]) -> str:
    """Human-readable label: the known value or the free text."""
    if choice is None:
        return ""
    if isinstance(choice, Other):
        return choice.text or OTHER
    return str(choice.value)


def fold_choice_columns(
    data: Any,
    field: str,
    enum_cls: type[StrEnum],
) -> Any:
    """``mode="before"`` validator helper: replace ``field``/``field_other``
    in a raw row with a single choice object.

    Non-dict input and values that are already choices pass through
    unchanged.
    """
    if not isinstance(data, dict):
        return data
    data = dict(data)
    other_key = f"{field}_other"
    other_text = data.pop(other_key, None)
    if field not in data:
        return data
    raw = data[field]
    if raw is None or isinstance(raw, str):
        data[field] = choice_from_columns(raw, other_text, enum_cls)
    return data


def unfold_choice_columns(row: dict[str, Any], field: str) -> dict[str, Any]:
    """Inverse of :func:`fold_choice_columns` on a ``model_dump`` dict."""
    choice = row.pop(field, None)
    other_key = f"{field}_other"
    if choice is None:
        row[field] = None
        row[other_key] = None
    elif choice.get("kind") == "other":
        row[field] = OTHER
        row[other_key] = choice.get("text") or None
    else:
        row[field] = choice.get("value")
        row[other_key] = None
    return row
