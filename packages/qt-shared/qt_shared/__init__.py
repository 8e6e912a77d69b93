"""QueryTorque Shared Infrastructure.

This package provides shared components for QueryTorque products:
- config: Shared settings management
- llm: OpenAI-compatible chat client used for external plan analysis
"""

__version__ = "0.1.0"

from .config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
