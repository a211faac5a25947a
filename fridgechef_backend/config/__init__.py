"""Static configuration shipped with the codebase."""

# LLM defaults are in a dedicated module for clarity and reuse.
from .llm import (
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TIMEOUT_SECONDS,
)
from .uploads import ALLOWED_FILE_TYPES, MAX_FILE_SIZE, MAX_REQUEST_SIZE

__all__ = [
    "ALLOWED_FILE_TYPES",
    "DEFAULT_LLM_BASE_URL",
    "DEFAULT_LLM_MAX_TOKENS",
    "DEFAULT_LLM_MODEL",
    "DEFAULT_LLM_TIMEOUT_SECONDS",
    "MAX_FILE_SIZE",
    "MAX_REQUEST_SIZE",
]
