"""Configuration management for easyclean."""

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

    # Storage Configuration
    sqlite_db_path: str = Field(default="./data/easyclean.db", description="SQLite database file path")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment name")

    # Session Configuration
    default_time_budget_minutes: int = Field(
        default=30, description="Time budget used when a session is started without one"
    )
    reset_checkpoint_cron: str = Field(
        default="0 7 * * *",
        description="CRON expression for the checkpoint at which recurring tasks become due again",
    )

    # Backup Configuration
    backup_version: str = Field(default="3.2", description="Version tag written into exported backups")

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production."""
        return self.environment == "production"

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
    HTTP_BAD_REQUEST: int = 400
    HTTP_NOT_FOUND: int = 404
    HTTP_UNPROCESSABLE: int = 422
    HTTP_SERVER_ERROR: int = 500

    # Time budgets (minutes)
    UNLIMITED_TIME_BUDGET: int = 9999  # "All" option, no time constraint
    TIME_BUDGET_OPTIONS: tuple[int, ...] = (15, 30, 45, 60, 9999)

    # New task defaults
    DEFAULT_TASK_DURATION_MINUTES: int = 10
    DEFAULT_TASK_PRIORITY: int = 2  # medium

    # Collections
    TASKS_COLLECTION: str = "tasks"
    ZONES_COLLECTION: str = "zones"
    SESSIONS_COLLECTION: str = "sessions"
    SESSION_HISTORY_COLLECTION: str = "session_history"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
