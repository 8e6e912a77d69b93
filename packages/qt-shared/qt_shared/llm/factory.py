"""Factory function for creating LLM clients."""

from typing import Optional

from ..config import get_settings
from .openai import OpenAIClient
from .protocol import LLMClient


def create_llm_client(
    base_url: Optional[str] = None,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
) -> Optional[LLMClient]:
    """Create an LLM client based on configuration.

    Arguments left as None are taken from the environment settings; the
    cached settings object itself is never modified.

    Args:
        base_url: OpenAI-compatible endpoint (QT_AI_BASE_URL)
        model: Model name (QT_AI_MODEL)
        api_key: Bearer credential (QT_AI_API_KEY)

    Returns:
        An LLM client instance, or None if the endpoint is not fully configured.
    """
    settings = get_settings()
    overrides = {
        "ai_base_url": base_url,
        "ai_model": model,
        "ai_api_key": api_key,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    if not settings.ai_configured:
        return None

    base_url, model, api_key = settings.get_ai_config()
    return OpenAIClient(
        api_key=api_key,
        model=model,
        base_url=base_url,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
    )
