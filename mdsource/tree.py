"""Directory tree abstractions used during resolution."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from .errors import MdsourceError, PathNotFoundError
from .models import MetadataType
from .utils import base_name, parse_metadata_xml, trim_path_to_content


class TreeContainer(ABC):
    """Contract for a read-only directory tree."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True when `path` is a known file or directory."""

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        """Return True for directories; raise PathNotFoundError for unknown paths."""

    @abstractmethod
    def read_dir(self, path: str) -> List[str]:
        """Return the names of the immediate children of `path` in a stable order."""

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """Return the contents of the file at `path`."""

    def walk(self, directory: str, ignore: Optional[Set[str]] = None) -> List[str]:
        """Return every file below `directory`, depth first, skipping `ignore`."""
        paths: List[str] = []
        for name in self.read_dir(directory):
            path = os.path.join(directory, name)
            if self.is_directory(path):
                paths.extend(self.walk(path, ignore))
            elif not ignore or path not in ignore:
                paths.append(path)
        return paths

    def find_content(self, directory: str, full_name: str) -> Optional[str]:
        return self._find(directory, full_name, metadata_xml=False)

    def find_metadata_xml(self, directory: str, full_name: str) -> Optional[str]:
        return self._find(directory, full_name, metadata_xml=True)

    def find_xml_from_content_path(
        self, content_path: str, metadata_type: MetadataType
    ) -> Optional[str]:
        """Locate the root descriptor owning a path somewhere inside a type's content."""
        root_content_path = trim_path_to_content(content_path, metadata_type)
        root_type_directory = os.path.dirname(root_content_path)
        return self.find_metadata_xml(root_type_directory, base_name(root_content_path))

    def _find(self, directory: str, full_name: str, *, metadata_xml: bool) -> Optional[str]:
        for name in self.read_dir(directory):
            if name != full_name and not name.startswith(f"{full_name}."):
                continue
            path = os.path.join(directory, name)
            is_metadata_xml = parse_metadata_xml(path) is not None
            if is_metadata_xml == metadata_xml:
                return path
        return None


class NodeFSTreeContainer(TreeContainer):
    """Tree backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        if not self.exists(path):
            raise PathNotFoundError(path)
        return os.path.isdir(path)

    def read_dir(self, path: str) -> List[str]:
        return sorted(os.listdir(path))

    def read_file(self, path: str) -> bytes:
        if not os.path.isfile(path):
            raise PathNotFoundError(path)
        return Path(path).read_bytes()


@dataclass
class VirtualFile:
    """File entry of a virtual directory, optionally carrying contents."""

    name: str
    data: bytes = b""


@dataclass
class VirtualDirectory:
    """A directory path and the names (or files) directly inside it."""

    dir_path: str
    children: List[Union[str, VirtualFile]] = field(default_factory=list)


VirtualEntry = Union[VirtualDirectory, Mapping[str, object]]


class VirtualTreeContainer(TreeContainer):
    """In-memory tree built from explicit directory listings."""

    def __init__(self, virtual_fs: Iterable[VirtualEntry]) -> None:
        self._tree: Dict[str, Dict[str, None]] = {}
        self._file_contents: Dict[str, bytes] = {}
        for entry in virtual_fs:
            self._populate(_as_virtual_directory(entry))

    def exists(self, path: str) -> bool:
        siblings = self._tree.get(os.path.dirname(path))
        return (siblings is not None and path in siblings) or path in self._tree

    def is_directory(self, path: str) -> bool:
        if not self.exists(path):
            raise PathNotFoundError(path)
        return path in self._tree

    def read_dir(self, path: str) -> List[str]:
        return [os.path.basename(child) for child in self._tree.get(path, {})]

    def read_file(self, path: str) -> bytes:
        if not self.exists(path) or self.is_directory(path):
            raise PathNotFoundError(path)
        return self._file_contents.get(path, b"")

    def _populate(self, directory: VirtualDirectory) -> None:
        children = self._tree.setdefault(directory.dir_path, {})
        for child in directory.children:
            if isinstance(child, VirtualFile):
                child_path = os.path.join(directory.dir_path, child.name)
                self._file_contents[child_path] = child.data
            else:
                child_path = os.path.join(directory.dir_path, child)
            children[child_path] = None


class RemoteTreeContainer(TreeContainer):
    """Tree indexed from a flat repository listing fetched elsewhere.

    Entries follow the git tree listing shape: ``{"path": ..., "type": "blob" | "tree"}``.
    File contents are only available when a `file_loader` is supplied.
    """

    def __init__(
        self,
        entries: Sequence[Mapping[str, str]] = (),
        *,
        file_loader: Callable[[str], bytes] | None = None,
    ) -> None:
        self._tree: Dict[str, Dict[str, None]] = {"": {}}
        self._file_loader = file_loader
        for entry in entries:
            self._index(entry)

    @classmethod
    def from_listing(
        cls,
        entries: Sequence[Mapping[str, str]],
        *,
        file_loader: Callable[[str], bytes] | None = None,
    ) -> "RemoteTreeContainer":
        return cls(entries, file_loader=file_loader)

    def exists(self, path: str) -> bool:
        siblings = self._tree.get(os.path.dirname(path))
        return path in self._tree or (siblings is not None and path in siblings)

    def is_directory(self, path: str) -> bool:
        if not self.exists(path):
            raise PathNotFoundError(path)
        return path in self._tree

    def read_dir(self, path: str) -> List[str]:
        return [os.path.basename(child) for child in self._tree.get(path, {})]

    def read_file(self, path: str) -> bytes:
        if not self.exists(path) or self.is_directory(path):
            raise PathNotFoundError(path)
        if self._file_loader is None:
            raise MdsourceError(f"No file loader configured to read {path}")
        return self._file_loader(path)

    def _index(self, entry: Mapping[str, str]) -> None:
        path = str(entry.get("path", "")).strip(os.sep)
        if not path:
            return
        parent = os.path.dirname(path)
        self._tree.setdefault(parent, {})[path] = None
        if entry.get("type") == "tree":
            self._tree.setdefault(path, {})


def _as_virtual_directory(entry: VirtualEntry) -> VirtualDirectory:
    if isinstance(entry, VirtualDirectory):
        return entry
    dir_path = entry.get("dir_path")
    if not isinstance(dir_path, str):
        raise TypeError("Virtual directory entries require a 'dir_path' string")
    children: List[Union[str, VirtualFile]] = []
    for child in entry.get("children") or []:  # type: ignore[union-attr]
        if isinstance(child, (str, VirtualFile)):
            children.append(child)
        elif isinstance(child, Mapping):
            data = child.get("data", b"")
            if isinstance(data, str):
                data = data.encode("utf-8")
            children.append(VirtualFile(name=str(child["name"]), data=data))
        else:
            raise TypeError(f"Unsupported virtual child entry: {child!r}")
    return VirtualDirectory(dir_path=dir_path, children=children)


__all__ = [
    "NodeFSTreeContainer",
    "RemoteTreeContainer",
    "TreeContainer",
    "VirtualDirectory",
    "VirtualFile",
    "VirtualTreeContainer",
]
