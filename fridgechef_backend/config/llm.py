"""Defaults for the vision LLM that are tracked in Git."""

# Model version used by default. Can be overridden via env if needed.
DEFAULT_LLM_MODEL = "claude-sonnet-4-5"

# Anthropic's OpenAI-compatible endpoint; keys look like ``sk-ant-api...``.
DEFAULT_LLM_BASE_URL = "https://api.anthropic.com/v1/"

DEFAULT_LLM_MAX_TOKENS = 2000
DEFAULT_LLM_TIMEOUT_SECONDS = 30.0

# Every provider key accepted by the analysis pipeline starts with this.
API_KEY_PREFIX = "sk-ant-api"
