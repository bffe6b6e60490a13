"""Configuration settings for the Cortex backend."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Supabase
    supabase_url: str
    supabase_secret_key: str | None = None  # Backend/admin access
    # Legacy key (deprecated)
    supabase_service_role_key: str | None = None

    # Suggestion generator (Hugging Face inference)
    hf_token: str | None = None
    hf_model_url: str = "https://api-inference.huggingface.co/models/Qwen/Qwen2.5-7B-Instruct"
    hf_max_new_tokens: int = 1024
    hf_temperature: float = 0.6

    # Content import
    youtube_api_key: str | None = None
    youtube_api_url: str = "https://www.googleapis.com/youtube/v3/playlistItems"

    # Timeouts (seconds) for external calls
    suggestion_timeout_seconds: float = 60.0
    store_timeout_seconds: float = 10.0
    scrape_timeout_seconds: float = 15.0

    # Tables neither the assistant nor the sync path may write to
    protected_tables: list[str] = ["audit_logs", "profiles"]
    # When set, only these tables are writable
    writable_tables: list[str] | None = None

    # Rate limiting
    think_rate_limit: str = "30/minute"

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars not in model

    def is_writable_table(self, table: str) -> bool:
        """Whether client or assistant writes may target this table."""
        if not table or table in self.protected_tables:
            return False
        if self.writable_tables is not None:
            return table in self.writable_tables
        return True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
