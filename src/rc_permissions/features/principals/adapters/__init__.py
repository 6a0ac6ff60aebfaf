"""Directory adapters."""

from .keycloak_directory import KeycloakDirectoryLookup

__all__ = ["KeycloakDirectoryLookup"]
