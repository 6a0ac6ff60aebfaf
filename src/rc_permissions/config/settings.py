"""
Configuration management for the permission engine.

Settings are read from the environment (prefix ``RC_PERMISSIONS_``) and an
optional ``.env`` file.
"""
from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr, field_validator

from .constants import CacheTTL, DatabaseSchemas, DefaultValues


class PermissionSettings(BaseSettings):
    """Settings for the permission engine and its default adapters."""

    model_config = SettingsConfigDict(
        env_prefix="RC_PERMISSIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database Configuration
    database_url: Optional[str] = None
    database_schema: str = DatabaseSchemas.DEFAULT
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=30.0, gt=0)

    # Engine behaviour
    directory_search_limit: int = Field(
        default=DefaultValues.DIRECTORY_SEARCH_LIMIT,
        ge=1,
        le=DefaultValues.MAX_DIRECTORY_SEARCH_LIMIT,
    )
    demo_rc_name: Optional[str] = DefaultValues.DEMO_RC_NAME

    # Redis Cache Configuration
    redis_url: Optional[str] = None
    cache_ttl_access: int = Field(default=CacheTTL.EFFECTIVE_ACCESS, ge=1)

    # Keycloak directory configuration
    keycloak_server_url: Optional[str] = None
    keycloak_realm: str = "master"
    keycloak_client_id: str = "admin-cli"
    keycloak_client_secret: Optional[SecretStr] = None
    keycloak_verify_ssl: bool = True
    keycloak_distribution_list_path: str = DefaultValues.DISTRIBUTION_LIST_PATH

    @field_validator("database_schema")
    @classmethod
    def validate_schema_name(cls, value: str) -> str:
        """Only allow plain identifiers since the schema is interpolated into SQL."""
        if not value.replace("_", "").isalnum():
            raise ValueError(f"Invalid schema name: {value}")
        return value

    @field_validator("demo_rc_name")
    @classmethod
    def empty_demo_name_disables(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @property
    def is_cache_enabled(self) -> bool:
        """Check if Redis caching is configured."""
        return self.redis_url is not None

    @property
    def is_directory_enabled(self) -> bool:
        """Check if the Keycloak directory adapter is configured."""
        return self.keycloak_server_url is not None and self.keycloak_client_secret is not None


@lru_cache()
def get_settings() -> PermissionSettings:
    """Get cached settings instance."""
    return PermissionSettings()
