from decimal import Decimal

from house_notes.utils.pluralize import pluralize, pluralize_word


def test_count_of_one_or_less_is_unchanged():
    assert pluralize("Bedroom", 1) == "Bedroom"
    assert pluralize("Bedroom", 0) == "Bedroom"
    assert pluralize("Bedroom", Decimal("0.5")) == "Bedroom"


def test_regular_plurals():
    assert pluralize("Bedroom", 2) == "Bedrooms"
    assert pluralize("Patio", 2) == "Patios"
    assert pluralize("Bench", 2) == "Benches"
    assert pluralize("Family", 2) == "Families"


def test_only_last_word_of_compound_is_pluralized():
    assert pluralize("Living Room", 3) == "Living Rooms"
    assert pluralize("Walk-in Closet", 2) == "Walk-in Closets"
    assert pluralize("Family Room", 2) == "Family Rooms"


def test_half_counts_pluralize():
    assert pluralize("Bathroom", Decimal("1.5")) == "Bathrooms"


def test_suffix_check_is_case_insensitive_and_keeps_stem_case():
    assert pluralize_word("BOX") == "BOXes"
    assert pluralize_word("PANTRY") == "PANTRies"
    assert pluralize_word("Bus") == "Buses"
    assert pluralize_word("") == ""
