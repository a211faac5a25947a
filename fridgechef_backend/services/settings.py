"""Normalization of user-supplied settings, locale and credentials."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from json import JSONDecodeError
from typing import Any, Mapping

from fridgechef_backend.config.llm import API_KEY_PREFIX
from fridgechef_backend.models import (
    DEFAULT_LOCALE,
    SUPPORTED_LOCALES,
    ApiConfiguration,
    CookingPreferences,
    CookingTimePreference,
    KitchenEquipment,
    Locale,
    SpiceLevel,
    UserSettings,
)

logger = logging.getLogger(__name__)

INVALID_SETTINGS_MESSAGE = "Invalid user settings format"
NO_API_KEY_MESSAGE = "No API key provided"
INVALID_API_KEY_FORMAT_MESSAGE = "Invalid API key format"


@dataclass(slots=True, frozen=True)
class SettingsResult:
    """Outcome of parsing settings; ``user_settings`` is ``None`` when absent."""

    user_settings: UserSettings | None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ApiKeyValidation:
    is_valid: bool
    error: str | None = None


def _section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be an object")
    return value


def _string_list(payload: Mapping[str, Any], key: str) -> list[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{key} must be a list of strings")
    return list(value)


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _optional_bool(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def _parse_cooking_preferences(payload: Mapping[str, Any]) -> CookingPreferences:
    spice_level = _optional_str(payload, "spiceLevel")
    if spice_level is not None and spice_level not in SpiceLevel.values():
        raise ValueError(f"invalid spiceLevel {spice_level!r}")

    time_preference = _optional_str(payload, "cookingTimePreference")
    if (
        time_preference is not None
        and time_preference not in CookingTimePreference.values()
    ):
        raise ValueError(f"invalid cookingTimePreference {time_preference!r}")

    servings = payload.get("defaultServings")
    if servings is not None and (
        isinstance(servings, bool) or not isinstance(servings, int) or servings < 1
    ):
        raise ValueError("defaultServings must be a positive integer")

    return CookingPreferences(
        cuisine_types=_string_list(payload, "cuisineTypes"),
        dietary_restrictions=_string_list(payload, "dietaryRestrictions"),
        spice_level=SpiceLevel(spice_level) if spice_level else None,
        cooking_time_preference=(
            CookingTimePreference(time_preference) if time_preference else None
        ),
        meal_types=_string_list(payload, "mealTypes"),
        default_servings=servings,
        additional_notes=_optional_str(payload, "additionalNotes"),
    )


def _parse_kitchen_equipment(payload: Mapping[str, Any]) -> KitchenEquipment:
    return KitchenEquipment(
        basic_appliances=_string_list(payload, "basicAppliances"),
        advanced_appliances=_string_list(payload, "advancedAppliances"),
        cookware=_string_list(payload, "cookware"),
        baking_equipment=_string_list(payload, "bakingEquipment"),
        other=_string_list(payload, "other"),
    )


def _parse_api_configuration(payload: Mapping[str, Any]) -> ApiConfiguration:
    return ApiConfiguration(
        has_personal_key=_optional_bool(payload, "hasPersonalKey"),
        key_validated=_optional_bool(payload, "keyValidated"),
        usage_tracking=_optional_bool(payload, "usageTracking"),
        last_validated=_optional_str(payload, "lastValidated"),
    )


def parse_user_settings(payload: object) -> UserSettings:
    """Build ``UserSettings`` from decoded JSON, raising ``ValueError`` on bad shape."""

    if not isinstance(payload, dict):
        raise ValueError("user settings must be a JSON object")

    cooking = _section(payload, "cookingPreferences")
    equipment = _section(payload, "kitchenEquipment")
    api_config = _section(payload, "apiConfiguration")

    return UserSettings(
        version=_optional_str(payload, "version"),
        last_updated=_optional_str(payload, "lastUpdated"),
        cooking_preferences=(
            _parse_cooking_preferences(cooking) if cooking is not None else None
        ),
        kitchen_equipment=(
            _parse_kitchen_equipment(equipment) if equipment is not None else None
        ),
        api_configuration=(
            _parse_api_configuration(api_config) if api_config is not None else None
        ),
    )


def process_user_settings(raw: str | None) -> SettingsResult:
    """Parse the ``userSettings`` form field.

    Missing or empty input means the user has no saved settings, which is not
    an error. Anything that does not decode into the expected structure is
    reported with ``INVALID_SETTINGS_MESSAGE``.
    """

    if not raw:
        return SettingsResult(user_settings=None)

    try:
        return SettingsResult(user_settings=parse_user_settings(json.loads(raw)))
    except (JSONDecodeError, ValueError) as exc:
        logger.warning("rejecting malformed user settings: %s", exc)
        return SettingsResult(user_settings=None, error=INVALID_SETTINGS_MESSAGE)


def extract_locale(raw: str | None) -> Locale:
    """Return a supported locale, falling back to the default one."""

    for locale in SUPPORTED_LOCALES:
        if raw == locale:
            return locale
    return DEFAULT_LOCALE


def process_legacy_dietary_restrictions(raw: str | None) -> list[str]:
    """Decode the legacy JSON-array field; malformed input means no restrictions."""

    if not raw:
        return []

    try:
        restrictions = json.loads(raw)
    except JSONDecodeError:
        logger.debug("ignoring malformed legacy dietary restrictions", exc_info=True)
        return []

    if not isinstance(restrictions, list):
        return []
    return [str(item) for item in restrictions]


def validate_api_key_format(raw: str | None) -> ApiKeyValidation:
    if not raw:
        return ApiKeyValidation(is_valid=False, error=NO_API_KEY_MESSAGE)

    if not raw.startswith(API_KEY_PREFIX):
        return ApiKeyValidation(is_valid=False, error=INVALID_API_KEY_FORMAT_MESSAGE)

    return ApiKeyValidation(is_valid=True)
