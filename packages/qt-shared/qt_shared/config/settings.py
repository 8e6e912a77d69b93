"""Shared application configuration for QueryTorque Plan."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Shared application settings loaded from environment.

    The plan engine itself takes no configuration; these settings cover the
    external analysis endpoint and the command line.
    """

    # External analysis (any OpenAI-compatible chat-completions endpoint)
    ai_base_url: str = "https://api.openai.com/v1"
    ai_api_key: str = ""
    ai_model: str = ""
    ai_temperature: float = 0.2
    ai_max_tokens: int = 900
    ai_locale: str = "en"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "QT_"
        env_file = ".env"
        extra = "ignore"

    @property
    def ai_configured(self) -> bool:
        """Check if base URL, API key and model are all set."""
        return all(
            (value or "").strip()
            for value in (self.ai_base_url, self.ai_api_key, self.ai_model)
        )

    def get_ai_config(self) -> tuple[str, str, str]:
        """Get the analysis endpoint configuration.

        Returns:
            Tuple of (base_url, model, api_key).
        """
        return self.ai_base_url.strip(), self.ai_model.strip(), self.ai_api_key.strip()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
