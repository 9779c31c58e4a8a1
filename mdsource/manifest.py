"""Package manifest (package.xml) parsing and serialisation."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator, List, Union

from .errors import ManifestError
from .models import MetadataComponent
from .registry import RegistryAccess

XML_NS_URL = "http://soap.sforce.com/2006/04/metadata"
XML_DECL = '<?xml version="1.0" encoding="UTF-8"?>\n'
WILDCARD = "*"


@dataclass
class PackageTypeMembers:
    """One `<types>` block: a type name and its member full names."""

    name: str
    members: List[str] = field(default_factory=list)


@dataclass
class PackageManifest:
    """Object form of a package manifest."""

    types: List[PackageTypeMembers] = field(default_factory=list)
    version: str = ""


def parse_manifest(document: Union[str, bytes]) -> PackageManifest:
    """Parse manifest XML into type blocks and the API version."""
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise ManifestError(f"Malformed package manifest: {exc}") from exc

    namespace = _detect_xml_namespace(root)
    if _local_name(root.tag) != "Package":
        raise ManifestError(f"Expected a Package root element, found '{_local_name(root.tag)}'")

    def tag(name: str) -> str:
        return f"{{{namespace}}}{name}" if namespace else name

    manifest = PackageManifest(version=(root.findtext(tag("version"), default="") or "").strip())
    for types_element in root.findall(tag("types")):
        name = (types_element.findtext(tag("name"), default="") or "").strip()
        if not name:
            raise ManifestError("Manifest <types> block is missing a <name>")
        members = [
            (member.text or "").strip()
            for member in types_element.findall(tag("members"))
            if (member.text or "").strip()
        ]
        manifest.types.append(PackageTypeMembers(name=name, members=members))
    return manifest


def serialize_manifest(manifest: PackageManifest, indentation: int = 4) -> str:
    """Render a manifest as XML with declaration and metadata namespace."""
    root = ET.Element("Package", {"xmlns": XML_NS_URL})
    for type_members in manifest.types:
        types_element = ET.SubElement(root, "types")
        for member in type_members.members:
            ET.SubElement(types_element, "members").text = member
        ET.SubElement(types_element, "name").text = type_members.name
    ET.SubElement(root, "version").text = manifest.version
    ET.indent(root, space=" " * indentation)
    return XML_DECL + ET.tostring(root, encoding="unicode") + "\n"


def manifest_components(
    manifest: PackageManifest, registry: RegistryAccess
) -> Iterator[MetadataComponent]:
    """Yield one component per declared member.

    A folder-scoped type member without a `/` names a folder, so it maps to the
    registered folder type. The `*` wildcard keeps the content type.
    """
    for type_members in manifest.types:
        for full_name in type_members.members:
            metadata_type = registry.get_type_by_name(type_members.name)
            if metadata_type.folder_type and full_name != WILDCARD and "/" not in full_name:
                metadata_type = registry.get_type_by_name(metadata_type.folder_type)
            yield MetadataComponent(full_name=full_name, type=metadata_type)


def _detect_xml_namespace(element: ET.Element) -> str | None:
    match = re.match(r"\{(.+)}", element.tag)
    return match.group(1) if match else None


def _local_name(tag: str) -> str:
    return tag.split("}", 1)[-1]


__all__ = [
    "PackageManifest",
    "PackageTypeMembers",
    "WILDCARD",
    "XML_DECL",
    "XML_NS_URL",
    "manifest_components",
    "parse_manifest",
    "serialize_manifest",
]
