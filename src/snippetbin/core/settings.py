"""Application settings and configuration.

This module defines all configuration options for the SnippetBin application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="SnippetBin", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./snippetbin.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    sqlite_busy_timeout_seconds: float = Field(
        default=15.0,
        alias="SQLITE_BUSY_TIMEOUT_SECONDS",
    )

    # Snapshot backups of the paste and user tables
    backup_enabled: bool = Field(default=True, alias="BACKUP_ENABLED")
    backup_dir: str = Field(default="./backups", alias="BACKUP_DIR")
    backup_interval_seconds: float = Field(default=3600.0, alias="BACKUP_INTERVAL_SECONDS")
    backup_retention: int = Field(default=24, ge=1, alias="BACKUP_RETENTION")
    user_backup_retention: int = Field(default=10, ge=1, alias="USER_BACKUP_RETENTION")

    # Removal of expired pastes (listings hide them regardless)
    expired_sweep_enabled: bool = Field(default=False, alias="EXPIRED_SWEEP_ENABLED")

    # Authentication
    min_password_length: int = Field(default=8, ge=1, alias="MIN_PASSWORD_LENGTH")
    totp_issuer: str = Field(default="SnippetBin", alias="TOTP_ISSUER")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
