"""
Shared Enumerations for House Life Notes Models.

All string enumerations for type-safe field constraints.  StrEnum values
compare equal to their string equivalents, so rows read back from the
hosted store validate directly into these types.

Selectors whose "Other" entry unlocks a free-text field list only their
*known* values here; the free-text alternative is modelled by
``house_notes.models.choices.Other``.  Appliance, feature and maintenance
types store a plain "Other" and include it as a member.
"""

from __future__ import annotations
from enum import StrEnum

OTHER: str = "Other"
"""Sentinel stored in a selector column when the free-text field is used."""


class Country(StrEnum):
    """Countries with a dedicated currency mapping."""

    UNITED_STATES = "United States"
    CANADA = "Canada"
    MEXICO = "Mexico"
    UNITED_KINGDOM = "United Kingdom"


class RoomTypeName(StrEnum):
    BEDROOM = "Bedroom"
    BATHROOM = "Bathroom"
    KITCHEN = "Kitchen"
    LIVING_ROOM = "Living Room"
    DINING_ROOM = "Dining Room"
    FAMILY_ROOM = "Family Room"
    OFFICE = "Office"
    DEN = "Den"
    LAUNDRY_ROOM = "Laundry Room"
    GARAGE = "Garage"
    BASEMENT = "Basement"
    ATTIC = "Attic"
    SUNROOM = "Sunroom"
    BONUS_ROOM = "Bonus Room"
    MUDROOM = "Mudroom"
    WALK_IN_CLOSET = "Walk-in Closet"
    PANTRY = "Pantry"
    UTILITY_ROOM = "Utility Room"


class ApplianceType(StrEnum):
    """Appliance kinds.  "Other" carries no free text for appliances."""

    REFRIGERATOR = "Refrigerator"
    STOVE_OVEN = "Stove/Oven"
    DISHWASHER = "Dishwasher"
    MICROWAVE = "Microwave"
    WASHING_MACHINE = "Washing Machine"
    DRYER = "Dryer"
    WATER_HEATER = "Water Heater"
    HVAC_SYSTEM = "HVAC System"
    FURNACE = "Furnace"
    AIR_CONDITIONER = "Air Conditioner"
    GARBAGE_DISPOSAL = "Garbage Disposal"
    OTHER = "Other"


class FeatureType(StrEnum):
    BARN = "Barn"
    SHED = "Shed"
    GARAGE = "Garage"
    DECK = "Deck"
    PATIO = "Patio"
    DRIVEWAY = "Driveway"
    WALKWAY = "Walkway"
    FENCE = "Fence"
    POOL = "Pool"
    HOT_TUB = "Hot Tub"
    GAZEBO = "Gazebo"
    PERGOLA = "Pergola"
    OTHER = "Other"


class MaintenanceType(StrEnum):
    ROOFING = "Roofing"
    SIDING = "Siding"
    PAINTING = "Painting"
    PAVING = "Paving"
    DECK_MAINTENANCE = "Deck Maintenance"
    FENCE_REPAIR = "Fence Repair"
    GUTTER_CLEANING = "Gutter Cleaning"
    LANDSCAPING = "Landscaping"
    TREE_REMOVAL = "Tree Removal"
    POWER_WASHING = "Power Washing"
    OTHER = "Other"


class SewageType(StrEnum):
    MUNICIPAL = "municipal"
    SEPTIC = "septic"
    GRAY_WATER = "gray_water"


class StoryCount(StrEnum):
    ONE = "1"
    TWO = "2"


class BuildStyle(StrEnum):
    COLONIAL = "Colonial"
    CONTEMPORARY = "Contemporary"
    CRAFTSMAN = "Craftsman"
    MEDITERRANEAN = "Mediterranean"
    MODERN = "Modern"
    RANCH = "Ranch"
    TRADITIONAL = "Traditional"
    TUDOR = "Tudor"
    VICTORIAN = "Victorian"


class ColorType(StrEnum):
    """Exterior finish of the house."""

    SIDING = "Siding"
    PAINT = "Paint"
    BRICK = "Brick"
    SHINGLE = "Shingle"


class RecordState(StrEnum):
    """Lifecycle tag of a persisted row, derived from ``deleted_at``."""

    ACTIVE = "Active"
    DELETED = "Deleted"
