"""Fridge photo analysis pipeline: from uploaded image to validated recipe."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from fridgechef_backend.config.llm import (
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TIMEOUT_SECONDS,
)
from fridgechef_backend.models import DEFAULT_LOCALE, Locale, Recipe, UserSettings
from fridgechef_backend.services.errors import (
    AuthError,
    MissingApiKeyError,
    UpstreamFormatError,
    ValidationError,
)
from fridgechef_backend.services.llm import (
    VisionLLMSettings,
    VisionModelClient,
    init_vision_llm_client,
)
from fridgechef_backend.services.prompts import generate_enhanced_prompt
from fridgechef_backend.services.recipes import parse_recipe_from_response
from fridgechef_backend.services.settings import (
    process_legacy_dietary_restrictions,
    process_user_settings,
    validate_api_key_format,
)
from fridgechef_backend.services.uploads import UploadedImage, validate_file_input

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AnalysisInput:
    """Everything a single analysis request carries."""

    files: tuple[UploadedImage, ...] = ()
    preferences: str | None = None
    dietary_restrictions: str | None = None
    locale: Locale = DEFAULT_LOCALE
    user_settings: str | None = None
    api_key: str | None = None


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    recipe: Recipe
    processing_time_ms: int


@dataclass(slots=True, frozen=True)
class AnalysisDependencies:
    """Side-effecting collaborators for one request."""

    model_client: VisionModelClient
    api_key: str
    is_personal_key: bool = False


@dataclass(slots=True, frozen=True)
class AnalysisConfig:
    """Process-wide settings used to build per-request dependencies."""

    shared_api_key: str | None = None
    model: str = DEFAULT_LLM_MODEL
    base_url: str = DEFAULT_LLM_BASE_URL
    max_tokens: int = DEFAULT_LLM_MAX_TOKENS
    timeout_seconds: float = DEFAULT_LLM_TIMEOUT_SECONDS
    client_factory: Callable[[VisionLLMSettings], VisionModelClient] = (
        init_vision_llm_client
    )


DependenciesFactory = Callable[[str | None], AnalysisDependencies]


def create_default_dependencies(
    personal_api_key: str | None, *, config: AnalysisConfig
) -> AnalysisDependencies:
    """Build a fresh model client for the personal key, or the shared one."""

    api_key = personal_api_key or config.shared_api_key
    if not api_key:
        raise MissingApiKeyError("No API key available")

    client = config.client_factory(
        VisionLLMSettings(
            api_key=api_key,
            model=config.model,
            base_url=config.base_url,
            max_tokens=config.max_tokens,
            timeout_seconds=config.timeout_seconds,
        )
    )
    return AnalysisDependencies(
        model_client=client,
        api_key=api_key,
        is_personal_key=bool(personal_api_key),
    )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _validate_locally(
    analysis_input: AnalysisInput, log_extra: dict[str, object]
) -> UserSettings | None:
    """Run the checks that need no credential or network access."""

    file_validation = validate_file_input(analysis_input.files)
    if not file_validation.is_valid:
        logger.info("rejected upload: %s", file_validation.error, extra=log_extra)
        raise ValidationError(file_validation.error)

    settings_result = process_user_settings(analysis_input.user_settings)
    if settings_result.error:
        raise ValidationError(settings_result.error)
    return settings_result.user_settings


def _generate_recipe(
    analysis_input: AnalysisInput,
    user_settings: UserSettings | None,
    dependencies: AnalysisDependencies,
    *,
    started: float,
    log_extra: dict[str, object],
) -> AnalysisResult:
    key_validation = validate_api_key_format(dependencies.api_key)
    if not key_validation.is_valid:
        logger.warning(
            "rejected API key: %s",
            key_validation.error,
            extra={**log_extra, "personal_key": dependencies.is_personal_key},
        )
        raise AuthError(key_validation.error)

    prompt = generate_enhanced_prompt(
        user_settings,
        analysis_input.preferences,
        process_legacy_dietary_restrictions(analysis_input.dietary_restrictions),
        analysis_input.locale,
    )

    image = analysis_input.files[0]
    logger.info(
        "sending fridge photo to vision model",
        extra={**log_extra, "image_bytes": image.size, "mime_type": image.content_type},
    )
    raw_text = dependencies.model_client.analyze_image(
        image_bytes=image.data,
        prompt=prompt,
        mime_type=image.content_type,
    )
    if not (raw_text or "").strip():
        raise UpstreamFormatError("vision model returned empty output")

    recipe = parse_recipe_from_response(raw_text)

    processing_time_ms = _elapsed_ms(started)
    logger.info(
        "recipe generated in %sms",
        processing_time_ms,
        extra={**log_extra, "difficulty": recipe.difficulty.value},
    )
    return AnalysisResult(recipe=recipe, processing_time_ms=processing_time_ms)


def analyze_user_fridge(
    analysis_input: AnalysisInput, dependencies: AnalysisDependencies
) -> AnalysisResult:
    """Turn a fridge photo into one validated recipe suggestion.

    Stages run in order and the first failure aborts the request:
    input validation and settings parsing raise ``ValidationError``, a
    malformed credential raises ``AuthError``, provider failures propagate as
    raised by the model client and unusable model output raises
    ``UpstreamFormatError``.
    """

    started = time.perf_counter()
    log_extra: dict[str, object] = {"locale": analysis_input.locale}
    user_settings = _validate_locally(analysis_input, log_extra)
    return _generate_recipe(
        analysis_input,
        user_settings,
        dependencies,
        started=started,
        log_extra=log_extra,
    )


def analyze_with_factory(
    analysis_input: AnalysisInput, dependencies_factory: DependenciesFactory
) -> AnalysisResult:
    """Like ``analyze_user_fridge`` but builds the dependencies after local checks.

    A missing credential (``MissingApiKeyError`` from the factory) is only
    reported once the upload and settings have been accepted.
    """

    started = time.perf_counter()
    log_extra: dict[str, object] = {"locale": analysis_input.locale}
    user_settings = _validate_locally(analysis_input, log_extra)
    dependencies = dependencies_factory(analysis_input.api_key)
    return _generate_recipe(
        analysis_input,
        user_settings,
        dependencies,
        started=started,
        log_extra=log_extra,
    )
