"""Configuration management for questflow."""

from pathlib import Path

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

    # SQLite Configuration
    sqlite_db_path: str = Field(
        default="./questflow_data/questflow.db", description="Path to the SQLite database file"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    environment: str = Field(default="development", description="Deployment environment name")

    # Identity Configuration
    secret_key: str | None = Field(default=None, description="Signing key for bearer credentials")
    token_max_age_seconds: int = Field(
        default=60 * 60 * 24 * 30, description="Maximum age of a bearer credential (in seconds)"
    )

    # Timer Configuration
    timer_tick_seconds: float = Field(default=1.0, description="Interval between timer ticks (in seconds)")
    default_estimated_minutes: int = Field(default=25, description="Estimated time for new quests (in minutes)")

    # HTTP Configuration
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production."""
        return self.environment.lower() == "production"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_NOT_FOUND: int = 404
    HTTP_CONFLICT: int = 409
    HTTP_UNPROCESSABLE: int = 422
    HTTP_SERVER_ERROR: int = 500

    # Reward draw weights, walked in this order
    REWARD_WEIGHTS: tuple[tuple[str, int], ...] = (
        ("points", 40),
        ("message", 30),
        ("badge", 20),
        ("unlockable", 10),
    )
    REWARD_WEIGHT_TOTAL: int = 100

    # Points reward range (inclusive)
    REWARD_POINTS_MIN: int = 10
    REWARD_POINTS_SPAN: int = 50  # 10..59

    # Task constraints
    PROGRESS_MIN: int = 0
    PROGRESS_MAX: int = 100
    ESTIMATED_MINUTES_MIN: int = 1
    ESTIMATED_MINUTES_MAX: int = 480
    TITLE_MAX_LENGTH: int = 200

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 500  # Default pagination limit for list queries

    # Identity
    IDENTITY_TOKEN_SALT: str = "questflow-identity"

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
