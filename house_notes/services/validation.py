"""
Form-boundary validation shared by the record editors.

Checks accumulate into a ``{field: message}`` dict; :func:`raise_if_errors`
turns a non-empty dict into ``RecordValidationError``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from house_notes.errors import RecordValidationError
from house_notes.models.choices import Other

B = TypeVar("B", bound=BaseModel)

MIN_YEAR: int = 1000
MAX_YEAR: int = 9999


def coerce_record(model_cls: type[B], data: Union[B, Mapping[str, Any]]) -> B:
    """Accept a model instance or a raw mapping from a form.

    Raises:
        RecordValidationError: The mapping does not validate; one message
            per offending field.
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(dict(data))
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for item in exc.errors():
            field = ".".join(str(part) for part in item["loc"]) or "__root__"
            errors.setdefault(field, item["msg"])
        raise RecordValidationError(errors=errors) from exc


def require_value(
    errors: dict[str, str], field: str, value: object, label: str
) -> None:
    """Flag *field* when *value* is missing or blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        errors[field] = f"{label} is required"


def require_other_text(
    errors: dict[str, str], field: str, choice: object, label: str
) -> None:
    """Flag an "Other" selection without its free text."""
    if isinstance(choice, Other) and not choice.text.strip():
        errors[field] = f"Please specify the {label.lower()}"


def check_year(errors: dict[str, str], field: str, value: Optional[int], label: str) -> None:
    if value is not None and not MIN_YEAR <= value <= MAX_YEAR:
        errors[field] = f"{label} must be a four-digit year"


def check_option(
    errors: dict[str, str], field: str, value: object, enum_cls: type[StrEnum], label: str
) -> None:
    """Flag a value that is not one of *enum_cls*'s listed options.

    Rows read back from the store may carry unlisted text; new saves may not.
    """
    if field in errors or value is None:
        return
    if not isinstance(value, enum_cls) and value not in {m.value for m in enum_cls}:
        errors[field] = f"{label} must be one of the listed options"


def raise_if_errors(errors: dict[str, str]) -> None:
    if errors:
        raise RecordValidationError(errors=errors)
