"""OpenAI LLM client."""

import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"


def build_endpoint(base_url: str) -> str:
    """Full chat-completions URL for a configured base URL.

    ``https://host`` -> ``https://host/v1/chat/completions``;
    ``https://host/v1`` -> ``https://host/v1/chat/completions``;
    a URL already ending in ``/chat/completions`` is kept.
    Returns "" for a blank base URL.
    """
    trimmed = (base_url or "").strip().rstrip("/")
    if not trimmed:
        return ""
    if trimmed.endswith(CHAT_COMPLETIONS_PATH):
        return trimmed
    if trimmed.endswith("/v1"):
        return f"{trimmed}{CHAT_COMPLETIONS_PATH}"
    return f"{trimmed}/v1{CHAT_COMPLETIONS_PATH}"


def normalize_base_url(base_url: str) -> str:
    """SDK base URL (the part before ``/chat/completions``)."""
    endpoint = build_endpoint(base_url)
    return endpoint[: -len(CHAT_COMPLETIONS_PATH)] if endpoint else ""


class OpenAIClient:
    """LLM client for OpenAI API.

    Also supports OpenAI-compatible APIs (OpenRouter, self-hosted gateways)
    via base_url. Requests are single-shot: no retry on failure.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 900,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: Bearer credential
            model: Model name
            base_url: Optional base URL for OpenAI-compatible APIs; normalized
                with ``normalize_base_url``
            temperature: Sampling temperature
            max_tokens: Completion token cap
        """
        self.api_key = api_key
        self.model = model
        self.base_url = normalize_base_url(base_url) if base_url else None
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.last_usage: dict = {}
        logger.info("Initialized OpenAIClient with model=%s, base_url=%s", model, self.base_url)

    def analyze(self, prompt: str, system: Optional[str] = None) -> str:
        """Send prompt to OpenAI and return response."""
        try:
            from openai import OpenAI
        except ImportError:
            logger.error("openai package not installed")
            raise ImportError("openai package required: pip install openai")

        logger.debug("Sending request to OpenAI API (prompt=%d chars)", len(prompt))
        start_time = time.time()
        client = OpenAI(api_key=self.api_key, base_url=self.base_url)

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        response = client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        duration = time.time() - start_time
        response_text = response.choices[0].message.content or ""

        self.last_usage = {}
        if hasattr(response, 'usage') and response.usage:
            u = response.usage
            self.last_usage = {
                "prompt_tokens": getattr(u, 'prompt_tokens', 0),
                "completion_tokens": getattr(u, 'completion_tokens', 0),
                "total_tokens": getattr(u, 'total_tokens', 0),
            }

        logger.info(
            "OpenAI API response: model=%s, duration=%.2fs, response=%d chars, tokens=%d",
            self.model, duration, len(response_text),
            self.last_usage.get("total_tokens", 0),
        )

        return response_text
