"""Infer a metadata type id from the shape of a path."""

from __future__ import annotations

from typing import Optional

from .registry import RegistryAccess
from .utils import ext_name, parent_name, parse_metadata_xml, split_path


def mixed_content_type_id(path: str, registry: RegistryAccess) -> Optional[str]:
    """Return the mixed content type owning a segment of `path`, if any.

    A folder component sitting directly in the type directory is not content, so
    folder-scoped types yield None for that shape.
    """
    segments = set(split_path(path))
    for directory_name, type_id in registry.mixed_content.items():
        if directory_name not in segments:
            continue
        if registry.get_type_by_name(type_id).in_folder and parent_name(path) == directory_name:
            return None
        return type_id
    return None


def determine_type_id(path: str, registry: RegistryAccess) -> Optional[str]:
    """Return a candidate type id for `path`; the first matching strategy wins."""
    type_id = mixed_content_type_id(path, registry)
    if type_id:
        return type_id

    metadata_xml = parse_metadata_xml(path)
    if metadata_xml is not None:
        type_id = registry.suffixes.get(metadata_xml.suffix)
        if type_id:
            return type_id

    extension = ext_name(path)
    if extension:
        return registry.suffixes.get(extension)
    return None


__all__ = ["determine_type_id", "mixed_content_type_id"]
