"""Path helpers shared by the tree containers, adapters and resolver."""

from __future__ import annotations

import os
import re
from typing import Optional

from .models import MetadataType, MetadataXml

META_XML_SUFFIX = "-meta.xml"

_META_XML_PATTERN = re.compile(r"(.+)\.(.+)-meta\.xml$")


def parse_metadata_xml(path: str) -> Optional[MetadataXml]:
    """Return the full name and suffix encoded in a `<name>.<suffix>-meta.xml` path."""
    match = _META_XML_PATTERN.match(os.path.basename(path))
    if match is None:
        return None
    return MetadataXml(full_name=match.group(1), suffix=match.group(2), path=path)


def base_name(path: str) -> str:
    """Return the file name up to its first dot."""
    return os.path.basename(path).split(".")[0]


def ext_name(path: str) -> Optional[str]:
    name = os.path.basename(path)
    if "." not in name:
        return None
    return name.rsplit(".", 1)[1]


def parent_name(path: str) -> str:
    return os.path.basename(os.path.dirname(path))


def split_path(path: str) -> list[str]:
    return path.split(os.sep)


def trim_path_to_content(path: str, metadata_type: MetadataType) -> str:
    """Trim `path` to the component root directly below the type directory.

    Folder-scoped types keep one more segment so the folder name is skipped.
    """
    parts = split_path(path)
    try:
        type_folder_index = parts.index(metadata_type.directory_name)
    except ValueError:
        return path
    offset = 3 if metadata_type.in_folder else 2
    return os.sep.join(parts[: type_folder_index + offset])


__all__ = [
    "META_XML_SUFFIX",
    "base_name",
    "ext_name",
    "parent_name",
    "parse_metadata_xml",
    "split_path",
    "trim_path_to_content",
]
