"""Metadata type registry loading and lookups."""

from .access import DEFAULT_REGISTRY_PATH, RegistryAccess, load_registry, read_registry_file

__all__ = [
    "DEFAULT_REGISTRY_PATH",
    "RegistryAccess",
    "load_registry",
    "read_registry_file",
]
