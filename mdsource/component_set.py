"""Aggregation of resolved and manifest-only components."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .component import SourceComponent
from .errors import NoComponentsToRetrieveError, NoSourceToDeployError
from .logging import get_logger
from .manifest import (
    WILDCARD,
    PackageManifest,
    PackageTypeMembers,
    manifest_components,
    parse_manifest,
    serialize_manifest,
)
from .models import ComponentLike, MetadataComponent, MetadataType
from .registry import RegistryAccess
from .resolver import MetadataResolver
from .tree import NodeFSTreeContainer, TreeContainer

logger = get_logger("component_set")

KEY_DELIMITER = "#"

SourceKey = Tuple[str, str, Optional[str], Optional[str]]


class ComponentSet:
    """Components keyed by `type#fullName`, each with zero or more source variants.

    `size` counts keys while iteration yields every source-backed variant, so the
    two differ when one component resolved from several distinct paths.
    """

    WILDCARD = WILDCARD

    def __init__(
        self,
        components: Iterable[ComponentLike] = (),
        registry: RegistryAccess | None = None,
    ) -> None:
        self.registry = registry or RegistryAccess()
        self.api_version = self.registry.api_version
        self._components: Dict[str, Dict[SourceKey, SourceComponent]] = {}
        for component in components:
            self.add(component)

    @classmethod
    def from_source(
        cls,
        path: str,
        *,
        registry: RegistryAccess | None = None,
        tree: TreeContainer | None = None,
    ) -> "ComponentSet":
        """Create a set by resolving every component found at `path`."""
        component_set = cls(registry=registry)
        component_set.resolve_source_components(path, tree=tree)
        return component_set

    @classmethod
    def from_manifest_file(
        cls,
        path: str,
        *,
        resolve: Union[str, Sequence[str], None] = None,
        literal_wildcard: bool = False,
        registry: RegistryAccess | None = None,
        tree: TreeContainer | None = None,
    ) -> "ComponentSet":
        """Create a set from a manifest file, optionally resolving source for its members.

        When resolving, a `*` member only acts as a filter unless `literal_wildcard`
        keeps it as a member.
        """
        registry = registry or RegistryAccess()
        tree = tree or NodeFSTreeContainer()
        should_resolve = bool(resolve)

        manifest = parse_manifest(tree.read_file(path))
        component_set = cls(registry=registry)
        filter_set = cls(registry=registry)
        if manifest.version:
            component_set.api_version = manifest.version

        for component in manifest_components(manifest, registry):
            if should_resolve:
                filter_set.add(component)
            is_wildcard = component.full_name == WILDCARD
            if not is_wildcard or literal_wildcard or not should_resolve:
                component_set.add(component)

        if should_resolve:
            to_resolve = [resolve] if isinstance(resolve, str) else list(resolve or [])
            for resolve_path in to_resolve:
                component_set.resolve_source_components(resolve_path, tree=tree, filter_set=filter_set)
        return component_set

    @property
    def size(self) -> int:
        return len(self._components)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Union[MetadataComponent, SourceComponent]]:
        for key, sources in self._components.items():
            if sources:
                yield from sources.values()
            else:
                type_id, _, full_name = key.partition(KEY_DELIMITER)
                yield MetadataComponent(
                    full_name=full_name, type=self.registry.get_type_by_name(type_id)
                )

    def __contains__(self, component: object) -> bool:
        return self.has(component)  # type: ignore[arg-type]

    def add(self, component: ComponentLike) -> None:
        sources = self._components.setdefault(self._simple_key(component), {})
        if isinstance(component, SourceComponent):
            sources[self._source_key(component)] = component

    def has(self, component: ComponentLike) -> bool:
        """Membership by type and full name only, ignoring source paths."""
        return self._simple_key(component) in self._components

    def get_source_components(
        self, for_member: Optional[ComponentLike] = None
    ) -> Iterator[SourceComponent]:
        """Yield source-backed components, optionally only those matching `for_member`.

        A child member is also found through an already resolved parent.
        """
        if for_member is None:
            for sources in self._components.values():
                yield from sources.values()
            return

        parent_type = self.registry.get_parent_type(self._member_type(for_member))
        if parent_type is not None:
            yield from self._find_children_through_parent(parent_type, for_member.full_name)
        yield from self._components.get(self._simple_key(for_member), {}).values()

    def has_source_components(self) -> bool:
        return any(True for _ in self.get_source_components())

    def get_deploy_components(self) -> List[SourceComponent]:
        components = list(self.get_source_components())
        if not components:
            raise NoSourceToDeployError()
        return components

    def get_retrieve_request(self, package_names: Sequence[str] | None = None) -> Dict[str, object]:
        if self.size == 0 and not package_names:
            raise NoComponentsToRetrieveError()
        return {
            "api_version": self.api_version,
            "package_names": list(package_names or []),
            "unpackaged": self.get_object(),
        }

    def get_object(self) -> PackageManifest:
        """Group member names by type name; folder types report their content type."""
        type_map: Dict[str, List[str]] = {}
        for key in self._components:
            type_id, _, full_name = key.partition(KEY_DELIMITER)
            metadata_type = self.registry.get_type_by_name(type_id)
            if metadata_type.folder_content_type:
                metadata_type = self.registry.get_type_by_name(metadata_type.folder_content_type)
            type_map.setdefault(metadata_type.name, []).append(full_name)

        return PackageManifest(
            types=[PackageTypeMembers(name=name, members=members) for name, members in type_map.items()],
            version=self.api_version,
        )

    def get_package_xml(self, indentation: int = 4) -> str:
        return serialize_manifest(self.get_object(), indentation)

    def resolve_source_components(
        self,
        path: str,
        *,
        tree: TreeContainer | None = None,
        filter_set: Union["ComponentSet", Iterable[ComponentLike], None] = None,
    ) -> "ComponentSet":
        """Resolve components at `path` and add them, honouring an optional filter.

        Returns a set of the components added by this call.
        """
        if filter_set is not None and not isinstance(filter_set, ComponentSet):
            filter_set = ComponentSet(filter_set, self.registry)

        resolver = MetadataResolver(self.registry, tree)
        added = ComponentSet(registry=self.registry)
        for component in resolver.get_components_from_path(path):
            if filter_set is None or self._included(component, filter_set):
                self.add(component)
                added.add(component)
                continue
            # only individually addressed children of an excluded component
            for child in component.get_children():
                if self._included(child, filter_set):
                    self.add(child)
                    added.add(child)
        logger.debug("Resolved %d components from %s", added.size, path)
        return added

    def _included(self, component: SourceComponent, filter_set: "ComponentSet") -> bool:
        if filter_set.has(component) or filter_set._has_wildcard(component.type):
            return True
        parent = component.parent
        if parent is None:
            return False
        return filter_set.has(parent) or filter_set._has_wildcard(parent.type)

    def _has_wildcard(self, metadata_type: MetadataType) -> bool:
        return f"{metadata_type.id}{KEY_DELIMITER}{WILDCARD}" in self._components

    def _find_children_through_parent(
        self, parent_type: MetadataType, child_full_name: str
    ) -> Iterator[SourceComponent]:
        parent_name = child_full_name.split(".")[0]
        parent_key = f"{parent_type.id}{KEY_DELIMITER}{parent_name}"
        for parent in self._components.get(parent_key, {}).values():
            for child in parent.get_children():
                if child.full_name == child_full_name:
                    yield child
                    break

    def _member_type(self, component: ComponentLike) -> MetadataType:
        if isinstance(component.type, str):
            return self.registry.get_type_by_name(component.type)
        return component.type

    def _simple_key(self, component: ComponentLike) -> str:
        if isinstance(component.type, str):
            type_id = component.type.lower().strip()
        else:
            type_id = component.type.id
        return f"{type_id}{KEY_DELIMITER}{component.full_name}"

    @staticmethod
    def _source_key(component: SourceComponent) -> SourceKey:
        return (component.type.id, component.full_name, component.xml, component.content)


__all__ = ["ComponentSet", "KEY_DELIMITER"]
