"""Error taxonomy raised by the resolution core."""

from __future__ import annotations


class MdsourceError(RuntimeError):
    """Base class for every error raised by mdsource."""


class TypeInferenceError(MdsourceError):
    """Raised when a path cannot be mapped to a metadata type."""


class PathNotFoundError(TypeInferenceError):
    """Raised when a requested path does not exist in the bound tree."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


class CouldNotInferTypeError(TypeInferenceError):
    """Raised when no inference strategy recognises a file path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Could not infer a metadata type for {path}")
        self.path = path


class MissingTypeDefinitionError(TypeInferenceError):
    """Raised when a type lookup finds no registry entry."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Missing metadata type definition in registry for id '{type_name}'")
        self.type_name = type_name


class ComponentSetError(MdsourceError):
    """Raised for invalid operations on a component set."""


class NoSourceToDeployError(ComponentSetError):
    """Raised when a deploy is requested for a set without source-backed members."""

    def __init__(self) -> None:
        super().__init__("No source-backed components present in the set")


class NoComponentsToRetrieveError(ComponentSetError):
    """Raised when a retrieve is requested for an empty set."""

    def __init__(self) -> None:
        super().__init__("No components in the set to retrieve")


class ConfigError(MdsourceError):
    """Raised when a configuration or registry file cannot be parsed."""


class ManifestError(MdsourceError):
    """Raised when a package manifest document is malformed."""


__all__ = [
    "ComponentSetError",
    "ConfigError",
    "CouldNotInferTypeError",
    "ManifestError",
    "MdsourceError",
    "MissingTypeDefinitionError",
    "NoComponentsToRetrieveError",
    "NoSourceToDeployError",
    "PathNotFoundError",
    "TypeInferenceError",
]
