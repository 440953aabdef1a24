"""Application configuration via pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Catalog location (env var: KNOWLEDGE_DIR). Empty uses the bundled knowledge/ directory.
    knowledge_dir: str = ""

    @computed_field
    @property
    def knowledge_path(self) -> Path | None:
        """Resolve the configured knowledge directory, if any."""
        return Path(self.knowledge_dir) if self.knowledge_dir else None

    # Defaults for callers that don't pass explicit values
    default_game_mode: str = "moc"
    max_dps_teams: int = 10
    max_support_teams: int = 12
    max_simulated_teams: int = 3

    # Per-team score breakdowns at DEBUG level (env var: SCORING_DIAGNOSTICS)
    scoring_diagnostics: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
