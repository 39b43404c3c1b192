"""Application configuration using Pydantic BaseSettings.

Loads settings from environment variables with sensible defaults for
local development. The Anthropic credential is read once at process start;
leaving it empty runs the service in fallback-only mode.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Anthropic
    anthropic_api_key: str = Field(
        default="",
        description=(
            "Anthropic API key for Claude lesson generation. Empty means every "
            "lesson is produced by the built-in fallback generator."
        ),
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-6",
        description="Claude model used for lesson generation",
    )
    max_tokens: int = Field(default=4096, gt=0, description="Completion token cap")
    request_timeout_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Upper bound for a single provider attempt",
    )
    max_retries: int = Field(
        default=2, ge=1, le=5, description="Provider attempts before giving up"
    )

    # Pipeline
    strict_schema_family: bool = Field(
        default=False,
        description=(
            "Reject a provider response whose JSON shape does not match the "
            "schema family requested for the variant (flat for standard, "
            "structured for global-enhanced)."
        ),
    )
    seed_demo_sessions: bool = Field(
        default=True, description="Seed the session history with demo lessons"
    )

    # Runtime
    log_level: str = Field(default="INFO", description="Python logging level")
    debug: bool = Field(default=False, description="Enable FastAPI debug mode")
    app_version: str = Field(default="1.0.0", description="Application version string")


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Returns:
        The application settings, loaded from environment on first call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
