"""Source adapter implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List, Optional

from ..forceignore import ForceIgnore
from ..models import MetadataType
from ..registry import RegistryAccess
from ..tree import TreeContainer
from .base import SourceAdapter
from .bundle import BundleSourceAdapter
from .decomposed import DecomposedSourceAdapter
from .default import DefaultSourceAdapter
from .in_folder import InFolderSourceAdapter
from .matching_content import MatchingContentSourceAdapter
from .mixed_content import MixedContentSourceAdapter

_ENTRY_POINT_GROUP = "mdsource.adapters"

AdapterFactory = Callable[..., SourceAdapter]

_BUILTIN_ADAPTERS: Dict[str, AdapterFactory] = {
    "default": DefaultSourceAdapter,
    "matchingContentFile": MatchingContentSourceAdapter,
    "mixedContent": MixedContentSourceAdapter,
    "bundle": BundleSourceAdapter,
    "decomposed": DecomposedSourceAdapter,
    "inFolder": InFolderSourceAdapter,
}


def get_adapter(
    metadata_type: MetadataType,
    adapter_id: str,
    registry: RegistryAccess,
    tree: TreeContainer,
    force_ignore: Optional[ForceIgnore] = None,
) -> SourceAdapter:
    """Instantiate the adapter registered under `adapter_id` for `metadata_type`."""
    factory = _BUILTIN_ADAPTERS.get(adapter_id) or _load_plugin(adapter_id)
    if factory is None:
        available = ", ".join(available_adapters())
        raise ValueError(f"Unknown source adapter '{adapter_id}'. Available adapters: {available}")
    instance = factory(metadata_type, registry, tree, force_ignore)
    if not isinstance(instance, SourceAdapter):
        raise TypeError(f"Adapter factory for '{adapter_id}' did not return a SourceAdapter instance")
    return instance


def available_adapters() -> List[str]:
    names = list(_BUILTIN_ADAPTERS)
    for entry in _iter_entry_points():
        if entry.name not in names:
            names.append(entry.name)
    return names


def _load_plugin(adapter_id: str) -> Optional[AdapterFactory]:
    for entry in _iter_entry_points():
        if entry.name != adapter_id:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load adapter entry point '{adapter_id}': {exc}") from exc
        if not callable(loaded):
            raise TypeError("Adapter entry point must be a SourceAdapter subclass or factory")
        return loaded
    return None


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "BundleSourceAdapter",
    "DecomposedSourceAdapter",
    "DefaultSourceAdapter",
    "InFolderSourceAdapter",
    "MatchingContentSourceAdapter",
    "MixedContentSourceAdapter",
    "SourceAdapter",
    "available_adapters",
    "get_adapter",
]
