"""Application settings and configuration.

This module defines all configuration options for the Notekeeper application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Notekeeper", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./notekeeper.db",
        alias="DATABASE_URL",
    )
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=False, alias="AUTO_CREATE_TABLES")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # bcrypt cost factor shared by passwords and login codes
    password_hash_rounds: int = Field(default=10, alias="PASSWORD_HASH_ROUNDS")

    # One-time login codes and reset links
    login_code_length: int = Field(default=6, alias="LOGIN_CODE_LENGTH")
    login_code_ttl_minutes: int = Field(default=6, alias="LOGIN_CODE_TTL_MINUTES")
    reset_link_ttl_minutes: int = Field(default=5, alias="RESET_LINK_TTL_MINUTES")

    # Reissue throttling (attempts before lockout, lockout length)
    throttle_max_attempts: int = Field(default=5, alias="THROTTLE_MAX_ATTEMPTS")
    throttle_lockout_hours: int = Field(default=24, alias="THROTTLE_LOCKOUT_HOURS")

    # Links embedded in outgoing mail
    reset_password_link: str = Field(
        default="http://localhost:3000/reset-password/",
        alias="RESET_PASSWORD_LINK",
    )
    landing_page_link: str = Field(
        default="http://localhost:3000",
        alias="LANDING_PAGE_LINK",
    )

    # SMTP delivery
    smtp_host: str = Field(default="", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: str = Field(default="", alias="SMTP_USERNAME")
    smtp_password: str = Field(default="", alias="SMTP_PASSWORD")
    smtp_from_email: str = Field(
        default="noreply@notekeeper.local",
        alias="SMTP_FROM_EMAIL",
    )
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    # "auto" sends only when credentials are configured; "true"/"false" force it.
    smtp_enabled_mode: str = Field(default="auto", alias="SMTP_ENABLED")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API documentation (Swagger UI / ReDoc)
    enable_docs: bool = Field(default=True, alias="ENABLE_DOCS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts async driver URLs so that Alembic migrations can run with
        synchronous drivers.

        Returns:
            Database URL compatible with synchronous database drivers
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        if url.startswith("sqlite+aiosqlite"):
            return url.replace("sqlite+aiosqlite", "sqlite", 1)
        return url

    @property
    def smtp_enabled(self) -> bool:
        """Return True when mail should actually go out over SMTP."""
        mode = self.smtp_enabled_mode.lower()
        if mode == "false":
            return False
        if mode == "true":
            return True
        return bool(self.smtp_host and self.smtp_username and self.smtp_password)


settings = Settings()  # type: ignore[call-arg]
