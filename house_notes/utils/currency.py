"""
Currency Formatting by Country.

Maps the house's country selector to a currency code, a display symbol
and a number-formatting locale, and renders amounts the way that locale
writes them.

Two symbols exist per country:

- ``CurrencyInfo.symbol`` is the unambiguous *display* symbol returned by
  :func:`get_currency_symbol` (``C$``, ``MX$``) for labels and inputs.
- The symbol inside a formatted amount is the one the locale itself uses
  for its own currency (``$1,234.50`` under en-CA).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple, Optional, Union

__all__ = [
    "CURRENCY_MAP",
    "DEFAULT_COUNTRY",
    "CurrencyInfo",
    "format_currency",
    "get_currency_info",
    "get_currency_symbol",
]

Amount = Union[int, float, Decimal, str]

DEFAULT_COUNTRY: str = "United States"

_MAX_FRACTION_DIGITS: int = 20


class CurrencyInfo(NamedTuple):
    code: str
    symbol: str
    locale: str


class _LocaleFormat(NamedTuple):
    group: str
    decimal: str
    symbol: str


CURRENCY_MAP: dict[str, CurrencyInfo] = {
    "United States": CurrencyInfo(code="USD", symbol="$", locale="en-US"),
    "Canada": CurrencyInfo(code="CAD", symbol="C$", locale="en-CA"),
    "Mexico": CurrencyInfo(code="MXN", symbol="MX$", locale="es-MX"),
    "United Kingdom": CurrencyInfo(code="GBP", symbol="£", locale="en-GB"),
    "Other": CurrencyInfo(code="USD", symbol="$", locale="en-US"),
}

# Keyed by (locale, currency code): how that locale writes that currency.
_LOCALE_FORMATS: dict[tuple[str, str], _LocaleFormat] = {
    ("en-US", "USD"): _LocaleFormat(group=",", decimal=".", symbol="$"),
    ("en-CA", "CAD"): _LocaleFormat(group=",", decimal=".", symbol="$"),
    ("es-MX", "MXN"): _LocaleFormat(group=",", decimal=".", symbol="$"),
    ("en-GB", "GBP"): _LocaleFormat(group=",", decimal=".", symbol="£"),
}


def get_currency_info(country: Optional[str]) -> CurrencyInfo:
    """Currency for *country*; empty or unrecognised falls back to the US."""
    return CURRENCY_MAP.get(country or DEFAULT_COUNTRY, CURRENCY_MAP[DEFAULT_COUNTRY])


def get_currency_symbol(country: Optional[str]) -> str:
    """Display symbol for *country* without formatting an amount."""
    return get_currency_info(country).symbol


def _group_digits(digits: str, separator: str) -> str:
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
    return separator.join(groups)


def format_currency(
    amount: Amount,
    country: Optional[str] = None,
    min_fraction_digits: Optional[int] = None,
    max_fraction_digits: Optional[int] = None,
) -> str:
    """Render *amount* as a currency string for *country*'s locale.

    Args:
        amount: The value to render.  Floats are converted through their
            shortest ``repr`` so ``0.1`` stays ``0.1``.
        country: Country selector value; ``None`` means United States.
        min_fraction_digits: Fewest decimals shown.  Defaults to
            ``min(2, max_fraction_digits)``.
        max_fraction_digits: Most decimals shown.  Defaults to ``2``.
            Rounding is half away from zero.

    Returns:
        e.g. ``"$1,234.50"``, ``"£300,000.00"``, ``"-$12.00"``.

    Raises:
        ValueError: If *amount* is not a finite number or the fraction
            digit bounds are out of range or inverted.
    """
    max_digits = 2 if max_fraction_digits is None else max_fraction_digits
    min_digits = min(2, max_digits) if min_fraction_digits is None else min_fraction_digits
    if not 0 <= max_digits <= _MAX_FRACTION_DIGITS or not 0 <= min_digits <= _MAX_FRACTION_DIGITS:
        raise ValueError("fraction digits must be between 0 and 20")
    if min_digits > max_digits:
        raise ValueError(
            f"min_fraction_digits ({min_digits}) exceeds "
            f"max_fraction_digits ({max_digits})"
        )

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"not a number: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"not a finite amount: {amount!r}")

    info = get_currency_info(country)
    fmt = _LOCALE_FORMATS[(info.locale, info.code)]

    rounded = value.quantize(Decimal(1).scaleb(-max_digits), rounding=ROUND_HALF_UP)
    negative = rounded < 0
    integer_part, _, fraction = f"{abs(rounded):f}".partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) < min_digits:
        fraction = fraction.ljust(min_digits, "0")

    number = _group_digits(integer_part, fmt.group)
    if fraction:
        number = f"{number}{fmt.decimal}{fraction}"
    sign = "-" if negative else ""
    return f"{sign}{fmt.symbol}{number}"
