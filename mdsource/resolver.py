"""Resolve source components from files and directory trees."""

from __future__ import annotations

import os
from typing import List, Optional

from .adapters import get_adapter
from .component import SourceComponent
from .errors import CouldNotInferTypeError, PathNotFoundError
from .forceignore import DEFAULT_IGNORE_FILE, ForceIgnore
from .inference import determine_type_id, mixed_content_type_id
from .logging import get_logger
from .registry import RegistryAccess
from .tree import NodeFSTreeContainer, TreeContainer
from .utils import parse_metadata_xml, split_path

logger = get_logger("resolver")


class MetadataResolver:
    """Maps paths in a tree to the source components they belong to."""

    def __init__(
        self,
        registry: RegistryAccess | None = None,
        tree: TreeContainer | None = None,
        *,
        ignore_file: str = DEFAULT_IGNORE_FILE,
    ) -> None:
        self.registry = registry or RegistryAccess()
        self.tree = tree or NodeFSTreeContainer()
        self._ignore_file = ignore_file
        self._force_ignore = ForceIgnore()

    def get_components_from_path(self, path: str) -> List[SourceComponent]:
        """Return the components found at `path`, files of a directory before its subdirectories."""
        if len(path) > 1:
            path = path.rstrip(os.sep)
        if not self.tree.exists(path):
            raise PathNotFoundError(path)

        self._force_ignore = ForceIgnore.find_and_create(path, self._ignore_file)

        if self.tree.is_directory(path):
            owner_xml = self._find_owning_metadata_xml(path)
            if owner_xml is None:
                return self._get_components_from_directory(path)
            logger.debug("Directory %s is content of %s", path, owner_xml)
            path = owner_xml

        component = self._resolve_component(path)
        return [component] if component is not None else []

    def _find_owning_metadata_xml(self, directory: str) -> Optional[str]:
        """Return the root descriptor when `directory` lies inside mixed content."""
        type_id = mixed_content_type_id(directory, self.registry)
        if not type_id:
            return None
        metadata_type = self.registry.get_type_by_name(type_id)
        parts = split_path(directory)
        folder_offset = 2 if metadata_type.in_folder else 1
        if len(parts) >= folder_offset and parts[-folder_offset] == metadata_type.directory_name:
            return None
        return self.tree.find_xml_from_content_path(directory, metadata_type)

    def _resolve_component(self, path: str) -> Optional[SourceComponent]:
        if parse_metadata_xml(path) is not None and self._force_ignore.denies(path, is_dir=False):
            logger.debug("Ignoring %s", path)
            return None

        type_id = determine_type_id(path, self.registry)
        if not type_id:
            raise CouldNotInferTypeError(path)

        metadata_type = self.registry.get_type_by_name(type_id)
        adapter_id = self.registry.get_adapter_id(metadata_type)
        adapter = get_adapter(metadata_type, adapter_id, self.registry, self.tree, self._force_ignore)
        return adapter.get_component(path)

    def _get_components_from_directory(self, root: str) -> List[SourceComponent]:
        components: List[SourceComponent] = []
        pending = [root]
        while pending:
            directory = pending.pop()
            if self._force_ignore.denies(directory, is_dir=True):
                logger.debug("Ignoring directory %s", directory)
                continue
            subdirectories = self._scan_directory(directory, components)
            # reversed so subdirectories are visited in listing order
            pending.extend(reversed(subdirectories))
        return components

    def _scan_directory(self, directory: str, components: List[SourceComponent]) -> List[str]:
        """Resolve descriptors directly in `directory`; return subdirectories still to visit."""
        subdirectories: List[str] = []
        for name in self.tree.read_dir(directory):
            path = os.path.join(directory, name)
            if self.tree.is_directory(path):
                subdirectories.append(path)
                continue
            if parse_metadata_xml(path) is None:
                continue

            component = self._resolve_component(path)
            if component is None:
                continue
            components.append(component)

            if self._stops_scan(component, path):
                logger.debug("Stopping scan of %s at %s", directory, component.full_name)
                return []
        return subdirectories

    def _stops_scan(self, component: SourceComponent, path: str) -> bool:
        """True when `path` sits inside mixed content rather than in the type directory."""
        metadata_type = component.type
        if not self.registry.is_mixed_content(metadata_type):
            return False
        type_path = os.path.dirname(os.path.dirname(path) if metadata_type.in_folder else path)
        return os.path.basename(type_path) != metadata_type.directory_name


__all__ = ["MetadataResolver"]
