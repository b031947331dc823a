"""
Settings for the workout structure editor, loaded with pydantic-settings.

Values come from environment variables (case-insensitive) and an optional
.env file. The DEFAULT_* variables control what the editor puts into nodes
it creates; ID_PREFIX is prepended to every allocated identifier.

Usage:
    from backend.settings import get_settings

    settings = get_settings()
    use_case = EditWorkoutUseCase(
        allocator=IdAllocator(prefix=settings.id_prefix),
        defaults=settings.editor_defaults,
    )
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.models import EditorDefaults


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------
    id_prefix: str = Field(
        default="",
        description="Prefix prepended to every identifier the editor allocates",
    )

    # -------------------------------------------------------------------------
    # Editor Defaults (applied to nodes created by add/move operations)
    # -------------------------------------------------------------------------
    default_superset_rest_sec: int = Field(
        default=60,
        ge=0,
        description="rest_between_sec for new or materialized supersets",
    )
    default_exercise_sets: int = Field(
        default=3,
        ge=1,
        description="Sets for newly added exercises",
    )
    default_exercise_reps: int = Field(
        default=10,
        ge=1,
        description="Reps for newly added exercises",
    )
    default_exercise_rest_sec: int = Field(
        default=60,
        ge=0,
        description="Rest seconds for newly added exercises",
    )
    default_exercise_type: str = Field(
        default="strength",
        description="Type for newly added exercises",
    )

    @property
    def editor_defaults(self) -> EditorDefaults:
        """Build the EditorDefaults the mutation engine uses."""
        return EditorDefaults(
            superset_rest_between_sec=self.default_superset_rest_sec,
            exercise_sets=self.default_exercise_sets,
            exercise_reps=self.default_exercise_reps,
            exercise_rest_sec=self.default_exercise_rest_sec,
            exercise_type=self.default_exercise_type,
        )

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated origins allowed in addition to localhost",
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parsed cors_allowed_origins, blanks removed."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
