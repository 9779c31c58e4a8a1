"""Source-backed metadata components."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .forceignore import ForceIgnore
from .models import MetadataType
from .tree import TreeContainer, VirtualEntry, VirtualTreeContainer
from .utils import parse_metadata_xml


class SourceComponent:
    """A metadata component resolved against files in a tree.

    Children are not stored: `get_children` rebuilds them from the tree on every
    call, which relies on the tree not changing during one resolution pass.
    """

    def __init__(
        self,
        name: str,
        type: MetadataType,
        tree: TreeContainer,
        *,
        xml: Optional[str] = None,
        content: Optional[str] = None,
        parent: Optional["SourceComponent"] = None,
        force_ignore: Optional[ForceIgnore] = None,
    ) -> None:
        self.name = name
        self.type = type
        self.xml = xml
        self.content = content
        self.parent = parent
        self._tree = tree
        self._force_ignore = force_ignore or ForceIgnore()

    @classmethod
    def create_virtual_component(
        cls,
        props: Mapping[str, object],
        virtual_fs: Iterable[VirtualEntry],
        force_ignore: Optional[ForceIgnore] = None,
    ) -> "SourceComponent":
        """Build a component whose tree is a fresh virtual tree over `virtual_fs`."""
        return cls(
            name=str(props["name"]),
            type=props["type"],  # type: ignore[arg-type]
            tree=VirtualTreeContainer(virtual_fs),
            xml=props.get("xml"),  # type: ignore[arg-type]
            content=props.get("content"),  # type: ignore[arg-type]
            parent=props.get("parent"),  # type: ignore[arg-type]
            force_ignore=force_ignore,
        )

    @property
    def full_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.full_name}.{self.name}"

    @property
    def tree(self) -> TreeContainer:
        return self._tree

    @property
    def parent_type(self) -> Optional[MetadataType]:
        return self.parent.type if self.parent is not None else None

    def get_children(self) -> List["SourceComponent"]:
        """Return one child per descriptor under the content root matching a child type."""
        children_types = self.type.children
        if children_types is None or not self.content:
            return []
        if not self._tree.exists(self.content) or not self._tree.is_directory(self.content):
            return []

        children: List[SourceComponent] = []
        for path in self._tree.walk(self.content):
            if self._force_ignore.denies(path, is_dir=False):
                continue
            metadata_xml = parse_metadata_xml(path)
            if metadata_xml is None:
                continue
            child_type_id = children_types.suffixes.get(metadata_xml.suffix)
            if child_type_id is None:
                continue
            children.append(
                SourceComponent(
                    name=metadata_xml.full_name,
                    type=children_types.types[child_type_id],
                    tree=self._tree,
                    xml=path,
                    parent=self,
                    force_ignore=self._force_ignore,
                )
            )
        return children

    def walk_content(self) -> List[str]:
        """Return every non-ignored file belonging to this component."""
        sources: List[str] = []
        if self.content:
            if self._tree.is_directory(self.content):
                ignore = {self.xml} if self.xml else None
                sources.extend(self._tree.walk(self.content, ignore))
            else:
                sources.append(self.content)
        if self.xml and self.xml not in sources:
            sources.append(self.xml)
        return [path for path in sources if not self._force_ignore.denies(path, is_dir=False)]

    def _identity(self) -> tuple:
        parent_identity = self.parent._identity() if self.parent is not None else None
        return (self.type, self.name, self.xml, self.content, parent_identity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceComponent):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return (
            f"SourceComponent(name={self.name!r}, type={self.type.id!r}, "
            f"xml={self.xml!r}, content={self.content!r})"
        )


__all__ = ["SourceComponent"]
