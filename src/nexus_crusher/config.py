"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables (NEXUS_*)."""

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # General
    debug: bool = False
    log_level: str = "WARNING"

    # Local API server
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS - comma-separated origins (env var: NEXUS_CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Data locations
    cache_dir: Path = Path.home() / ".cache" / "nexus-crusher"
    knowledge_dir: Path = PACKAGE_DIR / "knowledge"

    # Champion statistics
    stats_cache_ttl_hours: float = 24.0
    data_dragon_url: str = "https://ddragon.leagueoflegends.com"
    data_dragon_locale: str = "en_US"
    fallback_game_version: str = "13.24.1"
    http_timeout: float = 10.0
    estimate_missing_stats: bool = True

    # Recommendations
    recommendation_count: int = 5
    recommendation_cache_ttl_seconds: float = 60 * 60
    infer_symmetric_matchups: bool = False
    show_intros: bool = True
    intro_seed: int | None = None

    # League client
    auto_connect: bool = True
    lcu_request_timeout: float = 2.0
    liveness_poll_interval: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
