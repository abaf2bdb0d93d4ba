"""
Room Label Pluralization.

A fixed suffix-rule table, not a dictionary: irregular English plurals are
not handled.  Every room type offered by the selector is regular.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Union

__all__ = ["pluralize", "pluralize_word"]

_ES_SUFFIXES: tuple[str, ...] = ("ch", "sh", "s", "x", "z")


def pluralize_word(word: str) -> str:
    """Pluralize a single word, keeping the stem's casing.

    Rules are checked in order on the lower-cased word:
        ``...y``  -> drop ``y``, append ``ies``  (Family -> Families)
        ``...ch|sh|s|x|z`` -> append ``es``      (Bench -> Benches)
        otherwise -> append ``s``                (Bedroom -> Bedrooms)
    """
    if not word:
        return word
    lowered = word.lower()
    if lowered.endswith("y"):
        return word[:-1] + "ies"
    if lowered.endswith(_ES_SUFFIXES):
        return word + "es"
    return word + "s"


def pluralize(name: str, count: Union[int, float, Decimal]) -> str:
    """Display label for *count* rooms of type *name*.

    A count of 1 or less leaves *name* unchanged.  For compound names only
    the final word is pluralized (``"Living Room"`` -> ``"Living Rooms"``).
    """
    if count <= 1:
        return name
    head, sep, last = name.rpartition(" ")
    return f"{head}{sep}{pluralize_word(last)}"
