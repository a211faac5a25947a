"""Domain types shared by the analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional

Locale = Literal["en", "es"]

SUPPORTED_LOCALES: tuple[Locale, ...] = ("en", "es")
DEFAULT_LOCALE: Locale = "en"


class Difficulty(str, Enum):
    """Recipe difficulty tokens.

    The values are part of the machine-readable recipe contract and stay in
    English whatever locale the request was made in.
    """

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def values(cls) -> list[str]:
        return [entry.value for entry in cls]


class SpiceLevel(str, Enum):
    MILD = "mild"
    MEDIUM = "medium"
    SPICY = "spicy"
    VERY_SPICY = "very-spicy"

    @classmethod
    def values(cls) -> set[str]:
        return {entry.value for entry in cls}


class CookingTimePreference(str, Enum):
    QUICK = "quick"
    MODERATE = "moderate"
    ELABORATE = "elaborate"

    @classmethod
    def values(cls) -> set[str]:
        return {entry.value for entry in cls}


@dataclass(slots=True, frozen=True)
class Recipe:
    """A single recipe suggestion that satisfied the output contract."""

    title: str
    description: str
    cooking_time: str
    difficulty: Difficulty
    servings: int
    ingredients: list[str]
    instructions: list[str]
    tips: Optional[list[str]] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation in contract field order."""

        payload: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "cookingTime": self.cooking_time,
            "difficulty": self.difficulty.value,
            "servings": self.servings,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
        }
        if self.tips is not None:
            payload["tips"] = list(self.tips)
        return payload


@dataclass(slots=True, frozen=True)
class CookingPreferences:
    cuisine_types: list[str] = field(default_factory=list)
    dietary_restrictions: list[str] = field(default_factory=list)
    spice_level: Optional[SpiceLevel] = None
    cooking_time_preference: Optional[CookingTimePreference] = None
    meal_types: list[str] = field(default_factory=list)
    default_servings: Optional[int] = None
    additional_notes: Optional[str] = None


@dataclass(slots=True, frozen=True)
class KitchenEquipment:
    basic_appliances: list[str] = field(default_factory=list)
    advanced_appliances: list[str] = field(default_factory=list)
    cookware: list[str] = field(default_factory=list)
    baking_equipment: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    def all_items(self) -> list[str]:
        """Flatten every equipment category, preserving category order."""

        return [
            *self.basic_appliances,
            *self.advanced_appliances,
            *self.cookware,
            *self.baking_equipment,
            *self.other,
        ]


@dataclass(slots=True, frozen=True)
class ApiConfiguration:
    has_personal_key: bool = False
    key_validated: bool = False
    usage_tracking: bool = False
    last_validated: Optional[str] = None


@dataclass(slots=True, frozen=True)
class UserSettings:
    """Versioned user settings submitted alongside an analysis request."""

    version: Optional[str] = None
    last_updated: Optional[str] = None
    cooking_preferences: Optional[CookingPreferences] = None
    kitchen_equipment: Optional[KitchenEquipment] = None
    api_configuration: Optional[ApiConfiguration] = None
