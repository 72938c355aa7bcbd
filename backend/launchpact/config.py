"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # OpenRouter gateway
    openrouter_api_key: str | None = None
    openrouter_api_base: str = "https://openrouter.ai/api/v1"
    app_url: str = "https://launchpact-ai.vercel.app"
    app_title: str = "LaunchPact AI"

    # Generation
    llm_attempt_timeout_seconds: float = 30.0
    llm_rate_limit_backoff_seconds: float = 2.0
    # Comma-separated model ids; overrides the built-in roster when set
    llm_models: str | None = None

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Per-client limit on generation endpoints
    generation_rate_limit: str = "30/minute"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def llm_model_ids(self) -> list[str]:
        """Parse the roster override, if any."""
        if not self.llm_models:
            return []
        return [m.strip() for m in self.llm_models.split(",") if m.strip()]

    @property
    def api_key_configured(self) -> bool:
        return bool(self.openrouter_api_key and self.openrouter_api_key.strip())

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
