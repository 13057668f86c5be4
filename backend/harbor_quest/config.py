"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets and deployment values come from environment variables
    - get_settings() is cached (lru_cache) — single instance per process
    - Game constants are converted to frozen core value objects here; core never reads env

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from harbor_quest.core.errors import InvalidInputError
from harbor_quest.core.hint_ladder import validate_penalty_schedule
from harbor_quest.core.scoring import ScoringRules
from harbor_quest.core.session_aggregator import SessionRules


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://harbor:harbor@db:5432/harbor_quest"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_pool_recycle_seconds: int = 3600
    database_echo: bool = False

    # Location rounds
    location_max_score: int = 1000
    location_perfect_radius_m: float = 50.0
    location_falloff_km: float = 100.0
    location_correct_radius_km: float = 20.0
    hint_penalty_schedule: list[int] = [50, 100, 150, 200, 250]

    @field_validator("hint_penalty_schedule")
    @classmethod
    def check_schedule(cls, v: list[int]) -> list[int]:
        try:
            return list(validate_penalty_schedule(v))
        except InvalidInputError as e:
            raise ValueError(e.message) from e

    # Trivia rounds
    trivia_base_points: int = 500
    trivia_time_bonus_points: int = 500
    trivia_time_limit_seconds: float = 15.0

    # Sessions
    streak_threshold: int = 250
    default_round_count: int = 5
    max_round_count: int = 20
    game_idle_timeout_seconds: float = 3600.0
    finished_summary_capacity: int = 1000

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def scoring_rules(self) -> ScoringRules:
        return ScoringRules(
            location_max_score=self.location_max_score,
            perfect_radius_m=self.location_perfect_radius_m,
            falloff_m=self.location_falloff_km * 1000.0,
            correct_radius_m=self.location_correct_radius_km * 1000.0,
            trivia_base_points=self.trivia_base_points,
            trivia_time_bonus_points=self.trivia_time_bonus_points,
            trivia_time_limit_s=self.trivia_time_limit_seconds,
        )

    def session_rules(self) -> SessionRules:
        return SessionRules(
            streak_threshold=self.streak_threshold,
            max_round_count=self.max_round_count,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
