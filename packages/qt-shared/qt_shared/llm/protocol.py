"""Protocol definition for LLM clients.

All LLM client implementations should implement this protocol.
"""

from typing import Dict, Optional, Protocol


class LLMClient(Protocol):
    """Protocol for LLM client implementations.

    Attributes:
        last_usage: Dict with token usage from the most recent API call
            (prompt_tokens, completion_tokens, total_tokens).
    """

    last_usage: Dict[str, int]

    def analyze(self, prompt: str, system: Optional[str] = None) -> str:
        """Send prompt to LLM and return response.

        Args:
            prompt: The user message
            system: Optional system message sent ahead of the prompt

        Returns:
            The LLM's response as a string
        """
        ...
