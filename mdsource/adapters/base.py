"""Base class for source adapters."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Optional

from ..component import SourceComponent
from ..forceignore import ForceIgnore
from ..logging import get_logger
from ..models import MetadataType, MetadataXml
from ..registry import RegistryAccess
from ..tree import TreeContainer
from ..utils import parent_name, parse_metadata_xml

logger = get_logger("adapters")


class SourceAdapter(ABC):
    """Builds a SourceComponent for a path whose type is already known.

    Adapters only read from the tree; they never mutate shared state.
    """

    def __init__(
        self,
        metadata_type: MetadataType,
        registry: RegistryAccess,
        tree: TreeContainer,
        force_ignore: Optional[ForceIgnore] = None,
    ) -> None:
        self.type = metadata_type
        self.registry = registry
        self.tree = tree
        self.force_ignore = force_ignore or ForceIgnore()

    def get_component(self, path: str) -> Optional[SourceComponent]:
        """Return the component `path` belongs to, or None when it has no descriptor."""
        root_xml = self.parse_as_root_metadata_xml(path)
        if root_xml is None:
            root_xml_path = self.get_root_metadata_xml_path(path)
            if root_xml_path:
                root_xml = parse_metadata_xml(root_xml_path)
        if root_xml is not None and self.force_ignore.denies(root_xml.path, is_dir=False):
            logger.debug("Descriptor %s is ignored; skipping %s", root_xml.path, path)
            return None
        return self.populate(path, root_xml)

    def parse_as_root_metadata_xml(self, path: str) -> Optional[MetadataXml]:
        """Return the parsed descriptor when `path` is the component's root descriptor."""
        metadata_xml = parse_metadata_xml(path)
        if metadata_xml is None:
            return None
        if not self.type.strict_directory_name:
            return metadata_xml

        parent_path = os.path.dirname(path)
        type_path = os.path.dirname(parent_path) if self.type.in_folder else parent_path
        in_type_directory = os.path.basename(type_path) == self.type.directory_name
        named_after_parent = os.path.basename(parent_path) == metadata_xml.full_name
        return metadata_xml if in_type_directory or named_after_parent else None

    def calculate_name(self, root_xml: MetadataXml) -> str:
        if self.type.in_folder:
            return f"{parent_name(root_xml.path)}/{root_xml.full_name}"
        return root_xml.full_name

    def build_component(
        self,
        name: str,
        *,
        xml: Optional[str] = None,
        content: Optional[str] = None,
        metadata_type: Optional[MetadataType] = None,
        parent: Optional[SourceComponent] = None,
    ) -> SourceComponent:
        return SourceComponent(
            name=name,
            type=metadata_type or self.type,
            tree=self.tree,
            xml=xml,
            content=content,
            parent=parent,
            force_ignore=self.force_ignore,
        )

    @abstractmethod
    def get_root_metadata_xml_path(self, trigger: str) -> Optional[str]:
        """Locate the root descriptor for a path that is not itself the root descriptor."""

    @abstractmethod
    def populate(self, trigger: str, root_xml: Optional[MetadataXml]) -> Optional[SourceComponent]:
        """Build the component from the trigger path and its root descriptor."""
