"""Client helpers for interacting with a vision-capable LLM."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI
from openai.types.chat import ChatCompletion

from fridgechef_backend.config.llm import (
    DEFAULT_LLM_BASE_URL,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class VisionModelClient(Protocol):
    """Anything that can turn an image and a prompt into raw model text."""

    def analyze_image(
        self,
        *,
        image_bytes: bytes,
        prompt: str,
        mime_type: str | None = None,
    ) -> str: ...


@dataclass(slots=True, frozen=True)
class VisionLLMSettings:
    """Configuration required to talk to the vision model."""

    api_key: str
    model: str = DEFAULT_LLM_MODEL
    base_url: str = DEFAULT_LLM_BASE_URL
    max_tokens: int = DEFAULT_LLM_MAX_TOKENS
    timeout_seconds: float = DEFAULT_LLM_TIMEOUT_SECONDS


class VisionLLMClient:
    """Thin wrapper around the OpenAI-compatible chat API for vision requests."""

    def __init__(self, settings: VisionLLMSettings) -> None:
        self._settings = settings
        # Retries are left to the caller; one request means one provider call.
        self._client = OpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            max_retries=0,
            timeout=httpx.Timeout(settings.timeout_seconds, connect=5.0),
        )

    def analyze_image(
        self,
        *,
        image_bytes: bytes,
        prompt: str,
        mime_type: str | None = None,
    ) -> str:
        """Send the given prompt and image to the configured LLM."""
        if not image_bytes:
            raise ValueError("image_bytes is empty")

        user_text = (prompt or "").strip()
        if not user_text:
            raise ValueError("prompt is required")

        image_base64 = base64.b64encode(image_bytes).decode("ascii")
        mime = (mime_type or "image/jpeg").strip() or "image/jpeg"
        data_uri = f"data:{mime};base64,{image_base64}"

        try:
            response: ChatCompletion = self._client.chat.completions.create(
                model=self._settings.model,
                max_tokens=self._settings.max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "image_url", "image_url": {"url": data_uri}},
                            {"type": "text", "text": user_text},
                        ],
                    }
                ],
            )
        except APITimeoutError as e:
            logger.error("vision LLM timeout: %r", e)
            raise
        except APIConnectionError as e:
            logger.error("vision LLM network error: %r", e)
            raise
        except APIStatusError as e:
            logger.error("vision LLM returned HTTP %s", e.status_code)
            raise

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def init_vision_llm_client(settings: VisionLLMSettings) -> VisionLLMClient:
    """Create a ``VisionLLMClient`` instance from the provided settings."""

    return VisionLLMClient(settings)
