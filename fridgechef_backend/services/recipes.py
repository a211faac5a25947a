"""Parsing and validation of recipe suggestions returned by the vision model."""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from typing import Any, Mapping

from fridgechef_backend.models import Difficulty, Recipe
from fridgechef_backend.services.errors import UpstreamFormatError

logger = logging.getLogger(__name__)

MAX_RAW_LLM_OUTPUT_BYTES = 4_000
TRUNCATION_SUFFIX = " [truncated]"

_REQUIRED_TEXT_FIELDS = ("title", "description", "cookingTime")


def truncate_raw_llm_output(
    raw_text: str | None,
    *,
    limit_bytes: int = MAX_RAW_LLM_OUTPUT_BYTES,
) -> str | None:
    """Trim oversized LLM responses before they are logged."""
    if not raw_text:
        return None
    encoded = raw_text.encode("utf-8")
    if len(encoded) <= limit_bytes:
        return raw_text
    suffix_bytes = TRUNCATION_SUFFIX.encode("utf-8")
    if len(suffix_bytes) >= limit_bytes:
        return TRUNCATION_SUFFIX[:limit_bytes]
    truncated_bytes = encoded[: limit_bytes - len(suffix_bytes)]
    truncated_text = truncated_bytes.decode("utf-8", errors="ignore")
    return f"{truncated_text}{TRUNCATION_SUFFIX}"


def extract_json_object(text: str) -> Any:
    """Decode the first JSON value that starts at the first ``{`` in ``text``."""

    candidate = (text or "").strip()
    if not candidate:
        raise UpstreamFormatError("vision model returned empty output")

    start = candidate.find("{")
    if start == -1:
        raise UpstreamFormatError("vision model output did not contain JSON")

    try:
        payload, _ = json.JSONDecoder().raw_decode(candidate, start)
    except JSONDecodeError as exc:
        raise UpstreamFormatError("vision model output was not valid JSON") from exc
    return payload


def _string_list(payload: Mapping[str, Any], key: str, *, required: bool) -> list[str] | None:
    value = payload.get(key)
    if value is None and not required:
        if key in payload:
            raise UpstreamFormatError(f"{key} must be a list of strings")
        return None
    if not isinstance(value, list) or not all(
        isinstance(v, str) and v.strip() for v in value
    ):
        raise UpstreamFormatError(f"{key} must be a list of non-empty strings")
    if required and not value:
        raise UpstreamFormatError(f"{key} must not be empty")
    return list(value)


def validate_recipe_payload(payload: object) -> Recipe:
    """Check a decoded payload against the recipe contract."""

    if not isinstance(payload, dict):
        raise UpstreamFormatError("recipe payload must be a JSON object")

    for key in _REQUIRED_TEXT_FIELDS:
        value = payload.get(key)
        if not isinstance(value, str) or not value.strip():
            raise UpstreamFormatError(f"{key} must be a non-empty string")

    difficulty = payload.get("difficulty")
    if difficulty not in Difficulty.values():
        raise UpstreamFormatError(
            f"difficulty must be one of {Difficulty.values()}"
        )

    servings = payload.get("servings")
    if isinstance(servings, bool) or not isinstance(servings, int) or servings < 1:
        raise UpstreamFormatError("servings must be a positive integer")

    return Recipe(
        title=payload["title"],
        description=payload["description"],
        cooking_time=payload["cookingTime"],
        difficulty=Difficulty(difficulty),
        servings=servings,
        ingredients=_string_list(payload, "ingredients", required=True) or [],
        instructions=_string_list(payload, "instructions", required=True) or [],
        tips=_string_list(payload, "tips", required=False),
    )


def parse_recipe_from_response(raw_text: str) -> Recipe:
    """Extract and validate the recipe embedded in the model's reply."""

    try:
        return validate_recipe_payload(extract_json_object(raw_text))
    except UpstreamFormatError as exc:
        logger.warning(
            "vision model output rejected: %s",
            exc,
            extra={"raw_output": truncate_raw_llm_output(raw_text)},
        )
        raise
