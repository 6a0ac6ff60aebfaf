"""Configuration module for rc-permissions."""

from .constants import (
    AccessLevel,
    PrincipalType,
    DirectorySource,
    GROUP_PRINCIPAL_TYPES,
    DatabaseSchemas,
    CacheKeys,
    CacheTTL,
    DefaultValues,
    ErrorCodes,
)
from .settings import PermissionSettings, get_settings
from .logging_config import setup_logging, LoggingConfig, LogVerbosity, LogFormat

__all__ = [
    # Constants
    "AccessLevel",
    "PrincipalType",
    "DirectorySource",
    "GROUP_PRINCIPAL_TYPES",
    "DatabaseSchemas",
    "CacheKeys",
    "CacheTTL",
    "DefaultValues",
    "ErrorCodes",

    # Settings
    "PermissionSettings",
    "get_settings",

    # Logging configuration
    "setup_logging",
    "LoggingConfig",
    "LogVerbosity",
    "LogFormat",
]
