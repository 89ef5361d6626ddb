# src/slapboard/core/settings.py
"""Application settings and configuration.

This module defines all configuration options for the Slapboard service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

VoteDuplicatePolicyName = Literal["strict-reject", "strict-toggle", "open"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Slapboard", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./slapboard.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Admin bearer tokens (minted out of band by the maintenance script)
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 12,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Voting policy
    vote_duplicate_policy: VoteDuplicatePolicyName = Field(
        default="strict-reject",
        alias="VOTE_DUPLICATE_POLICY",
    )
    default_actions: list[str] = Field(
        default=["slap", "hug", "kiss", "love", "hate"],
        alias="DEFAULT_ACTIONS",
    )
    seed_default_actions: bool = Field(default=True, alias="SEED_DEFAULT_ACTIONS")
    trending_window_hours: int = Field(default=24, alias="TRENDING_WINDOW_HOURS")

    # Voter identity resolution
    identity_include_device: bool = Field(default=False, alias="IDENTITY_INCLUDE_DEVICE")
    trusted_ip_headers: list[str] = Field(
        default=["cf-connecting-ip", "x-real-ip", "x-forwarded-for"],
        alias="TRUSTED_IP_HEADERS",
    )
    device_cookie_name: str = Field(default="device_id", alias="DEVICE_COOKIE_NAME")
    device_cookie_max_age_days: int = Field(default=365, alias="DEVICE_COOKIE_MAX_AGE_DAYS")

    # Rate limits (events per window, per network address)
    post_rate_limit_max: int = Field(default=5, alias="POST_RATE_LIMIT_MAX")
    post_rate_limit_window_minutes: int = Field(
        default=60,
        alias="POST_RATE_LIMIT_WINDOW_MINUTES",
    )
    action_rate_limit_max: int = Field(default=3, alias="ACTION_RATE_LIMIT_MAX")
    action_rate_limit_window_minutes: int = Field(
        default=60,
        alias="ACTION_RATE_LIMIT_WINDOW_MINUTES",
    )
    vote_rate_limit_enabled: bool = Field(default=False, alias="VOTE_RATE_LIMIT_ENABLED")
    vote_rate_limit_max: int = Field(default=30, alias="VOTE_RATE_LIMIT_MAX")
    vote_rate_limit_window_minutes: int = Field(
        default=60,
        alias="VOTE_RATE_LIMIT_WINDOW_MINUTES",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
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
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def rate_limit_policies(self) -> dict[str, tuple[int, int]]:
        """Return `(max_events, window_minutes)` keyed by rate-limit category label."""
        return {
            "post": (self.post_rate_limit_max, self.post_rate_limit_window_minutes),
            "action_suggestion": (
                self.action_rate_limit_max,
                self.action_rate_limit_window_minutes,
            ),
            "vote": (self.vote_rate_limit_max, self.vote_rate_limit_window_minutes),
        }


settings = Settings()  # type: ignore[call-arg]
