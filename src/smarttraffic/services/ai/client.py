"""Chat-completion access to the OpenRouter language models."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from openai import OpenAI, OpenAIError

from ...config import settings
from ..errors import AIServiceError

ApiKeyType = Literal["default", "routing"]

logger = logging.getLogger(__name__)


@lru_cache()
def get_openai_client(key_type: ApiKeyType = "default") -> OpenAI:
    """Cached client per key type.

    The routing key is used when requested and configured; otherwise the
    default key is used.
    """
    key = settings.llm_routing_api_key if key_type == "routing" and settings.llm_routing_api_key else settings.llm_api_key
    if not key:
        raise AIServiceError(
            "The required language-model API key is not configured. Please set SMARTTRAFFIC_LLM_API_KEY."
        )
    return OpenAI(
        base_url=settings.llm_base_url,
        api_key=key,
        timeout=settings.llm_timeout_seconds,
        default_headers={
            "HTTP-Referer": settings.site_url,
            "X-Title": settings.site_title,
        },
    )


def get_chat_completion(
    prompt: str,
    model: str | None = None,
    json_mode: bool = False,
    key_type: ApiKeyType = "default",
) -> str:
    """Return the model's reply to a single user prompt.

    Raises:
        AIServiceError: the key is missing, the request failed or the reply was empty.
    """
    client = get_openai_client(key_type)
    kwargs = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    try:
        completion = client.chat.completions.create(
            model=model or settings.llm_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            **kwargs,
        )
    except OpenAIError as exc:
        logger.warning(f"Chat completion failed: {exc}")
        raise AIServiceError(f"AI service request failed: {exc}") from exc

    content = completion.choices[0].message.content if completion.choices else None
    if not content:
        raise AIServiceError("Failed to get a valid response from the AI service.")
    return content.strip()
