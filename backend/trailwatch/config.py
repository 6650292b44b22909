"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

import hashlib
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./trailwatch.db",
        description="Database connection URL"
    )
    db_encryption_key: str = Field(
        default="defaultdbencryptionkey",
        description="Secret used to encrypt OAuth tokens at rest"
    )

    # === Public host ===
    host: Optional[str] = Field(default=None)
    fly_app_name: Optional[str] = Field(default=None)
    port: int = Field(default=8080)

    # === Beacon webhook ===
    wh_seed: str = Field(
        default="defaultwebhookseed",
        description="Seed for the secret beacon webhook path"
    )

    # === Leader election ===
    fly_region: Optional[str] = Field(default=None)
    primary_region: Optional[str] = Field(default=None)

    # === Beacon polling ===
    beacon_poll_interval_seconds: float = Field(default=45.0, gt=0)
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret")
    )
    strava_user_id: Optional[str] = Field(
        default=None,
        description="Athlete id that is allowed to authorize"
    )
    strava_max_retries: int = Field(default=5, ge=1)
    strava_initial_backoff_seconds: float = Field(default=1.0, ge=0)
    strava_cache_ttl_seconds: float = Field(default=300.0, ge=0)

    # === Discord ===
    discord_webhook_url: Optional[str] = Field(
        default=None,
        description="Discord webhook for trail notifications"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Fly/Render postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @property
    def host_uri(self) -> str:
        """Public base URL of this deployment."""
        if self.host:
            return f"https://{self.host}"
        if self.fly_app_name:
            return f"https://{self.fly_app_name}.fly.dev"
        return f"http://localhost:{self.port}"

    @property
    def webhook_secret(self) -> str:
        """Path segment guarding the beacon webhook route."""
        return hashlib.sha256(self.wh_seed.encode()).hexdigest()[:32]

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()
