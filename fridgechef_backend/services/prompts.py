"""Prompt construction for fridge photo analysis."""

from __future__ import annotations

from string import Template
from typing import Sequence

from fridgechef_backend.models import (
    CookingPreferences,
    Difficulty,
    KitchenEquipment,
    Locale,
    UserSettings,
)

_BASE_PROMPTS: dict[Locale, Template] = {
    "en": Template(
        """
Analyze this fridge photo and identify all visible ingredients. Based on the available ingredients, suggest ONE complete recipe that can be made primarily with these ingredients.

Please respond in this exact JSON format:
{
  "title": "Recipe Name",
  "description": "Brief description of the dish",
  "cookingTime": "30 minutes",
  "difficulty": "$difficulty_options",
  "servings": 4,
  "ingredients": [
    "2 cups flour",
    "1 egg",
    "..."
  ],
  "instructions": [
    "Step 1: ...",
    "Step 2: ...",
    "..."
  ],
  "tips": ["Optional cooking tip 1", "..."]
}

Requirements:
- Use primarily ingredients visible in the photo
- Provide clear, step-by-step instructions
- Include realistic cooking times
- Make the recipe practical and achievable
- If ingredients are unclear, make reasonable assumptions
- The "difficulty" field must be exactly $difficulty_list"""
    ),
    "es": Template(
        """
Analiza esta foto de nevera e identifica todos los ingredientes visibles. Basándote en los ingredientes disponibles, sugiere UNA receta completa que se pueda hacer principalmente con estos ingredientes.

Por favor responde en este formato JSON exacto:
{
  "title": "Nombre de la Receta",
  "description": "Breve descripción del plato",
  "cookingTime": "30 minutos",
  "difficulty": "$difficulty_options",
  "servings": 4,
  "ingredients": [
    "2 tazas de harina",
    "1 huevo",
    "..."
  ],
  "instructions": [
    "Paso 1: ...",
    "Paso 2: ...",
    "..."
  ],
  "tips": ["Consejo de cocina opcional 1", "..."]
}

Requisitos:
- Usa principalmente los ingredientes visibles en la foto
- Proporciona instrucciones claras paso a paso
- Incluye tiempos de cocción realistas
- Haz que la receta sea práctica y realizable
- Si los ingredientes no están claros, haz suposiciones razonables
- IMPORTANTE: El campo "difficulty" debe ser exactamente $difficulty_list en inglés, nunca traducido"""
    ),
}

_LIST_CONJUNCTIONS: dict[Locale, str] = {"en": "or", "es": "o"}

_PREFERENCE_LABELS: dict[Locale, dict[str, str]] = {
    "en": {
        "heading": "User Preferences:",
        "cuisines": "Preferred cuisines",
        "dietary": "Dietary restrictions",
        "spice": "Spice level preference",
        "time": "Cooking time preference",
        "meals": "Preferred meal types",
        "servings": "Default servings",
        "notes": "Additional notes",
    },
    "es": {
        "heading": "Preferencias del Usuario:",
        "cuisines": "Cocinas preferidas",
        "dietary": "Restricciones dietéticas",
        "spice": "Preferencia de nivel de picante",
        "time": "Preferencia de tiempo de cocción",
        "meals": "Tipos de comida preferidos",
        "servings": "Porciones predeterminadas",
        "notes": "Notas adicionales",
    },
}

_COOKING_TIME_LABELS: dict[Locale, dict[str, str]] = {
    "en": {
        "quick": "Quick meals (≤30 min)",
        "moderate": "Moderate cooking time (30-60 min)",
        "elaborate": "Elaborate recipes (60+ min)",
    },
    "es": {
        "quick": "Comidas rápidas (≤30 min)",
        "moderate": "Tiempo de cocción moderado (30-60 min)",
        "elaborate": "Recetas elaboradas (60+ min)",
    },
}

_EQUIPMENT_LABELS: dict[Locale, dict[str, str]] = {
    "en": {
        "header": "Available Kitchen Equipment",
        "suggest": "Please suggest recipes that work with the available equipment",
        "avoid": "Avoid techniques requiring equipment not listed",
    },
    "es": {
        "header": "Equipos de Cocina Disponibles",
        "suggest": "Por favor sugiere recetas que funcionen con el equipo disponible",
        "avoid": "Evita técnicas que requieran equipo no listado",
    },
}

_EXTRA_PREFERENCES_LABELS: dict[Locale, str] = {
    "en": "Additional preferences",
    "es": "Preferencias adicionales",
}

_LEGACY_DIETARY_LABELS: dict[Locale, str] = {
    "en": "Legacy dietary restrictions",
    "es": "Restricciones dietéticas heredadas",
}


def _difficulty_list(locale: Locale) -> str:
    quoted = [f'"{value}"' for value in Difficulty.values()]
    return f"{', '.join(quoted[:-1])} {_LIST_CONJUNCTIONS[locale]} {quoted[-1]}"


def render_base_prompt(locale: Locale) -> str:
    """Return the locale's instruction block with the recipe JSON contract."""

    return (
        _BASE_PROMPTS[locale]
        .substitute(
            difficulty_options="|".join(Difficulty.values()),
            difficulty_list=_difficulty_list(locale),
        )
        .strip()
    )


def build_cooking_preferences_section(
    prefs: CookingPreferences, locale: Locale
) -> str:
    labels = _PREFERENCE_LABELS[locale]
    section = f"\n\n{labels['heading']}"

    if prefs.cuisine_types:
        section += f"\n- {labels['cuisines']}: {', '.join(prefs.cuisine_types)}"
    if prefs.dietary_restrictions:
        section += f"\n- {labels['dietary']}: {', '.join(prefs.dietary_restrictions)}"
    if prefs.spice_level:
        section += f"\n- {labels['spice']}: {prefs.spice_level.value}"
    if prefs.cooking_time_preference:
        time_label = _COOKING_TIME_LABELS[locale][prefs.cooking_time_preference.value]
        section += f"\n- {labels['time']}: {time_label}"
    if prefs.meal_types:
        section += f"\n- {labels['meals']}: {', '.join(prefs.meal_types)}"
    if prefs.default_servings:
        section += f"\n- {labels['servings']}: {prefs.default_servings}"
    if prefs.additional_notes:
        section += f"\n- {labels['notes']}: {prefs.additional_notes}"

    return section


def build_kitchen_equipment_section(
    equipment: KitchenEquipment, locale: Locale
) -> str:
    items = equipment.all_items()
    if not items:
        return ""

    labels = _EQUIPMENT_LABELS[locale]
    return (
        f"\n\n{labels['header']}: {', '.join(items)}"
        f"\n- {labels['suggest']}"
        f"\n- {labels['avoid']}"
    )


def generate_enhanced_prompt(
    user_settings: UserSettings | None,
    preferences: str | None,
    dietary_restrictions: Sequence[str],
    locale: Locale,
) -> str:
    """Render the full prompt for one analysis request.

    Only the human-readable instructions vary with ``locale``; the JSON
    contract, including the ``difficulty`` tokens, is identical everywhere.
    """

    prompt = render_base_prompt(locale)

    if user_settings is not None:
        if user_settings.cooking_preferences is not None:
            prompt += build_cooking_preferences_section(
                user_settings.cooking_preferences, locale
            )
        if user_settings.kitchen_equipment is not None:
            prompt += build_kitchen_equipment_section(
                user_settings.kitchen_equipment, locale
            )

    if preferences:
        prompt += f"\n\n{_EXTRA_PREFERENCES_LABELS[locale]}: {preferences}"

    if dietary_restrictions:
        prompt += (
            f"\n\n{_LEGACY_DIETARY_LABELS[locale]}: {', '.join(dietary_restrictions)}"
        )

    return prompt
