"""Read-only access to the metadata type registry."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from ..errors import ConfigError, MissingTypeDefinitionError
from ..models import ChildTypes, MetadataType

DEFAULT_REGISTRY_PATH = Path(__file__).with_name("data") / "registry.yml"
DEFAULT_ADAPTER_ID = "default"


class RegistryAccess:
    """Immutable view over registry data: types, suffixes, mixed content and adapters."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        raw = data if data is not None else read_registry_file(DEFAULT_REGISTRY_PATH)
        if not isinstance(raw, Mapping):
            raise ConfigError("Registry data must be a mapping")

        types, child_parents = _build_types(raw.get("types"))
        self._types: Mapping[str, MetadataType] = MappingProxyType(types)
        self._child_parents: Mapping[str, str] = MappingProxyType(child_parents)
        self._suffixes: Mapping[str, str] = _freeze_table(raw.get("suffixes"), "suffixes")
        self._mixed_content: Mapping[str, str] = _freeze_table(
            raw.get("mixed_content"), "mixed_content"
        )
        self._adapters: Mapping[str, str] = _freeze_table(
            raw.get("adapters"), "adapters", lower_values=False
        )
        api_version = raw.get("api_version")
        self._api_version = str(api_version) if api_version is not None else ""

    @property
    def types(self) -> Mapping[str, MetadataType]:
        return self._types

    @property
    def suffixes(self) -> Mapping[str, str]:
        return self._suffixes

    @property
    def mixed_content(self) -> Mapping[str, str]:
        return self._mixed_content

    @property
    def adapters(self) -> Mapping[str, str]:
        return self._adapters

    @property
    def api_version(self) -> str:
        return self._api_version

    def get_type_by_name(self, name: str) -> MetadataType:
        """Return the type registered under `name` (case and space insensitive)."""
        lower = name.lower().replace(" ", "")
        metadata_type = self._types.get(lower)
        if metadata_type is not None:
            return metadata_type
        parent_id = self._child_parents.get(lower)
        if parent_id is not None:
            children = self._types[parent_id].children
            if children is not None and lower in children.types:
                return children.types[lower]
        raise MissingTypeDefinitionError(lower)

    def get_type_by_suffix(self, suffix: str) -> Optional[MetadataType]:
        type_id = self._suffixes.get(suffix)
        return self.get_type_by_name(type_id) if type_id else None

    def get_parent_type(self, metadata_type: MetadataType) -> Optional[MetadataType]:
        """Return the type declaring `metadata_type` as a child, if any."""
        parent_id = self._child_parents.get(metadata_type.id)
        return self._types[parent_id] if parent_id else None

    def get_folder_type(self, metadata_type: MetadataType) -> Optional[MetadataType]:
        if not metadata_type.folder_type:
            return None
        return self.get_type_by_name(metadata_type.folder_type)

    def is_mixed_content(self, metadata_type: MetadataType) -> bool:
        return metadata_type.directory_name in self._mixed_content

    def get_adapter_id(self, metadata_type: MetadataType) -> str:
        return self._adapters.get(metadata_type.id, DEFAULT_ADAPTER_ID)


def read_registry_file(path: Path) -> Dict[str, Any]:
    """Parse a registry YAML document from disk."""
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse registry {path.name}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read registry {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"Registry {path.name} must contain a mapping at the root")
    return loaded


def load_registry(path: Path | str | None = None) -> RegistryAccess:
    """Return a registry loaded from `path`, or the bundled default registry."""
    if path is None:
        return RegistryAccess()
    return RegistryAccess(read_registry_file(Path(path).expanduser()))


def _build_types(value: Any) -> Tuple[Dict[str, MetadataType], Dict[str, str]]:
    if not isinstance(value, Mapping):
        raise ConfigError("Registry 'types' must be a mapping")

    types: Dict[str, MetadataType] = {}
    child_parents: Dict[str, str] = {}
    for key, entry in value.items():
        metadata_type = _build_type(str(key), entry)
        types[metadata_type.id] = metadata_type
        if metadata_type.children is not None:
            for child_id in metadata_type.children.types:
                child_parents[child_id] = metadata_type.id
    return types, child_parents


def _build_type(key: str, entry: Any) -> MetadataType:
    if not isinstance(entry, Mapping):
        raise ConfigError(f"Registry type '{key}' must be a mapping")
    for required in ("name", "directory_name"):
        if not entry.get(required):
            raise ConfigError(f"Registry type '{key}' is missing '{required}'")

    children = None
    children_data = entry.get("children")
    if isinstance(children_data, Mapping):
        child_entries = children_data.get("types") or {}
        if not isinstance(child_entries, Mapping):
            raise ConfigError(f"Children of registry type '{key}' must be a mapping")
        child_types = {
            str(child_key).lower(): _build_type(str(child_key), child_entry)
            for child_key, child_entry in child_entries.items()
        }
        children = ChildTypes(
            types=MappingProxyType(child_types),
            suffixes=_freeze_table(children_data.get("suffixes"), f"{key}.children.suffixes"),
        )

    return MetadataType(
        id=str(entry.get("id") or key).lower(),
        name=str(entry["name"]),
        directory_name=str(entry["directory_name"]),
        suffix=str(entry["suffix"]) if entry.get("suffix") else None,
        in_folder=bool(entry.get("in_folder", False)),
        strict_directory_name=bool(entry.get("strict_directory_name", False)),
        folder_type=str(entry["folder_type"]).lower() if entry.get("folder_type") else None,
        folder_content_type=(
            str(entry["folder_content_type"]).lower() if entry.get("folder_content_type") else None
        ),
        children=children,
    )


def _freeze_table(value: Any, label: str, *, lower_values: bool = True) -> Mapping[str, str]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise ConfigError(f"Registry '{label}' must be a mapping")
    frozen = {
        str(key): str(item).lower() if lower_values else str(item) for key, item in value.items()
    }
    return MappingProxyType(frozen)
