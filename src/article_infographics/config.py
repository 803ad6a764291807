"""Configuration helpers for the article infographics service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(
        None,
        alias="OPENAI_BASE_URL",
        description="Optional override for OpenAI-compatible endpoints.",
    )
    llm_model: str = Field("gpt-4", description="Chat-completion model.")
    temperature: float = Field(0.7, description="Generation temperature.")
    max_tokens: int = Field(4000, description="Max output tokens per completion.")
    content_char_limit: int = Field(
        8000,
        description="Only this many leading characters of the article reach the model.",
    )
    min_content_length: int = Field(
        100, description="Articles shorter than this many characters are rejected."
    )
    fetch_timeout: float = Field(
        15.0, description="Seconds to wait for the article page before giving up."
    )
    llm_timeout: float = Field(
        60.0, description="Seconds to wait for the completion API before giving up."
    )
    user_agent: str = Field(
        DEFAULT_USER_AGENT,
        description="Browser identity sent when fetching pages; some sites reject bots.",
    )
    cors_allow_origin: str = Field("*", description="Access-Control-Allow-Origin value.")
    log_level: str = Field("INFO", description="Root logging level.")


def get_settings() -> Settings:
    """Return a fresh settings instance (reads the environment each call)."""
    return Settings()
