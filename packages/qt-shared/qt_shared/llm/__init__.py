"""LLM client implementations for QueryTorque.

A single OpenAI-compatible chat client serves every configured endpoint.
"""

from .protocol import LLMClient
from .openai import OpenAIClient, build_endpoint, normalize_base_url
from .factory import create_llm_client

__all__ = [
    # Protocol
    "LLMClient",
    # Clients
    "OpenAIClient",
    "build_endpoint",
    "normalize_base_url",
    # Factory
    "create_llm_client",
]
