"""Failure taxonomy for fridge analysis and its mapping onto HTTP responses."""

from __future__ import annotations

from dataclasses import dataclass

import openai

AUTH_MISSING_KEY_MESSAGE = (
    "Personal API key required. Please configure your Anthropic API key in settings."
)
AUTH_PERSONAL_KEY_MESSAGE = (
    "Invalid personal API key. Please check your Anthropic API key in settings."
)
AUTH_SHARED_KEY_MESSAGE = "Authentication failed. Please configure a valid API key."
RATE_LIMIT_MESSAGE = "Service is temporarily busy. Please try again in a moment."
UPSTREAM_FORMAT_MESSAGE = "Failed to generate a valid recipe. Please try again."
INTERNAL_ERROR_MESSAGE = "Service temporarily unavailable. Please try again later."

_AUTH_MARKERS = (
    "401",
    "unauthorized",
    "authentication",
    "invalid_api_key",
    "invalid api key",
    "no api key",
)
_RATE_LIMIT_MARKERS = ("rate_limit",)


class AnalysisError(RuntimeError):
    """Base class for failures raised by the analysis pipeline."""


class ValidationError(AnalysisError):
    """Raised when request input is rejected before reaching the model."""


class AuthError(AnalysisError):
    """Raised when the provider credential is missing or unusable."""


class MissingApiKeyError(AuthError):
    """Raised when neither a personal nor a shared credential is available."""


class RateLimitError(AnalysisError):
    """Raised when the provider reports that we are over quota."""


class UpstreamFormatError(AnalysisError):
    """Raised when the model output does not satisfy the recipe contract."""


@dataclass(slots=True, frozen=True)
class ClassifiedError:
    status: int
    message: str
    is_auth_error: bool = False


def _status_code(error: BaseException) -> int | None:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def _is_auth_failure(error: BaseException, status: int | None) -> bool:
    if isinstance(error, (AuthError, openai.AuthenticationError)):
        return True
    return status == 401


def _is_rate_limited(error: BaseException, status: int | None) -> bool:
    if isinstance(error, (RateLimitError, openai.RateLimitError)):
        return True
    return status == 429


def _auth_error(error: BaseException, personal_key: bool) -> ClassifiedError:
    if isinstance(error, MissingApiKeyError):
        auth_message = AUTH_MISSING_KEY_MESSAGE
    elif personal_key:
        auth_message = AUTH_PERSONAL_KEY_MESSAGE
    else:
        auth_message = AUTH_SHARED_KEY_MESSAGE
    return ClassifiedError(status=401, message=auth_message, is_auth_error=True)


def classify_analysis_error(
    error: object, *, personal_key: bool = False
) -> ClassifiedError:
    """Map any failure onto a status code and a user-safe message.

    ``personal_key`` selects the wording of credential failures so users who
    supplied their own key are pointed at their settings. Message markers are
    only consulted for errors that did not come from our own pipeline, since
    parse failures may carry text produced by the model.
    """

    if isinstance(error, str):
        error = Exception(error)
    if not isinstance(error, BaseException):
        return ClassifiedError(status=500, message=INTERNAL_ERROR_MESSAGE)

    status = _status_code(error)

    if _is_auth_failure(error, status):
        return _auth_error(error, personal_key)

    if _is_rate_limited(error, status):
        return ClassifiedError(status=429, message=RATE_LIMIT_MESSAGE)

    if isinstance(error, UpstreamFormatError):
        return ClassifiedError(status=502, message=UPSTREAM_FORMAT_MESSAGE)

    if isinstance(error, ValidationError):
        # Validation messages are the fixed strings defined next to each check.
        return ClassifiedError(status=400, message=str(error))

    message = str(error).lower()
    if any(marker in message for marker in _AUTH_MARKERS):
        return _auth_error(error, personal_key)
    if any(marker in message for marker in _RATE_LIMIT_MARKERS):
        return ClassifiedError(status=429, message=RATE_LIMIT_MESSAGE)

    return ClassifiedError(status=500, message=INTERNAL_ERROR_MESSAGE)
