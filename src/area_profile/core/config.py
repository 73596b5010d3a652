"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (spatial store)
    database_url: str | None = Field(
        default=None,
        description="PostgreSQL+PostGIS async connection string (required for the PostGIS spatial store)",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # Area resolution
    min_overlap_threshold: float = Field(
        default=0.10,
        description="Minimum share of a base unit's own area the polygon must cover for the unit to be selected",
        gt=0,
        le=1,
    )
    parent_code_length: int = Field(
        default=4,
        description="Number of leading unit-code characters that identify the administrative parent",
        gt=0,
    )
    national_code: str | None = Field(
        default=None,
        description="Code the metric provider serves national baseline figures under (e.g. 00)",
    )

    # Metric provider
    metric_provider_base_url: str | None = Field(
        default=None,
        description="Base URL of the statistics provider serving per-unit metric families",
    )
    metric_provider_api_key: str | None = Field(
        default=None,
        description="Optional bearer token for the statistics provider",
    )
    metric_provider_timeout: float = Field(
        default=45.0,
        description="Statistics provider request timeout in seconds",
        gt=0,
    )

    @field_validator("metric_provider_base_url")
    @classmethod
    def validate_metric_provider_base_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not v.startswith(("https://", "http://")):
            msg = "metric_provider_base_url must be an http(s) URL"
            raise ValueError(msg)
        return v.rstrip("/")

    # Parcel registry
    parcel_token_url: str = Field(
        default="https://apimanager.lantmateriet.se/oauth2/token",
        description="OAuth2 token endpoint for the parcel registry",
    )
    parcel_search_url: str = Field(
        default="https://api.lantmateriet.se/distribution/produkter/registerbeteckning/v5",
        description="Parcel registry designation search base URL",
    )
    parcel_scope: str = Field(
        default="registerbeteckning_direkt_v5_read",
        description="OAuth2 scope requested for parcel searches",
    )
    parcel_client_id: str | None = Field(
        default=None,
        description="Parcel registry OAuth2 consumer key",
    )
    parcel_client_secret: str | None = Field(
        default=None,
        description="Parcel registry OAuth2 consumer secret",
    )
    parcel_timeout: float = Field(
        default=10.0,
        description="Parcel registry request timeout in seconds",
        gt=0,
    )
    parcel_buffer_meters: float = Field(
        default=100.0,
        description="Half-width in meters of the square drawn around a parcel centre point",
        gt=0,
    )

    @property
    def parcel_registry_configured(self) -> bool:
        """Whether parcel registry credentials are present."""
        return bool(self.parcel_client_id and self.parcel_client_secret)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
