"""Core data models shared across mdsource components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Union


@dataclass(frozen=True)
class ChildTypes:
    """Child type descriptors declared by a composed/decomposed type."""

    types: Mapping[str, "MetadataType"]
    suffixes: Mapping[str, str]


@dataclass(frozen=True)
class MetadataType:
    """Immutable registry entry describing one metadata type."""

    id: str
    name: str
    directory_name: str
    suffix: Optional[str] = None
    in_folder: bool = False
    strict_directory_name: bool = False
    folder_type: Optional[str] = None
    folder_content_type: Optional[str] = None
    children: Optional[ChildTypes] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class MetadataComponent:
    """Minimal (full name, type) identity referenced from a manifest."""

    full_name: str
    type: MetadataType


@dataclass(frozen=True)
class MetadataXml:
    """Parsed pieces of a metadata descriptor file name."""

    full_name: str
    suffix: str
    path: str


class ComponentLike(Protocol):
    """Anything carrying a full name and a type (object or type name)."""

    @property
    def full_name(self) -> str: ...

    @property
    def type(self) -> Union[MetadataType, str]: ...


__all__ = [
    "ChildTypes",
    "ComponentLike",
    "MetadataComponent",
    "MetadataType",
    "MetadataXml",
]
