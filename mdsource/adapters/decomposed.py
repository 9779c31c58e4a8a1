"""Adapter for types split into a root descriptor and child descriptor fragments."""

from __future__ import annotations

import os
from typing import Optional

from ..component import SourceComponent
from ..models import MetadataXml
from ..utils import parse_metadata_xml, trim_path_to_content
from .mixed_content import MixedContentSourceAdapter


class DecomposedSourceAdapter(MixedContentSourceAdapter):
    """A parent descriptor plus child descriptors below the same content root.

    Example::

        objects/
        └── Account/
            ├── Account.object-meta.xml
            └── fields/
                └── Rating__c.field-meta.xml

    A child descriptor resolves to that child, taken from the parent's children.
    """

    own_folder = True

    def parse_as_root_metadata_xml(self, path: str) -> Optional[MetadataXml]:
        if self._child_type_id(path) is not None:
            return None
        return super().parse_as_root_metadata_xml(path)

    def get_component(self, path: str) -> Optional[SourceComponent]:
        if self._child_type_id(path) is None or self.get_root_metadata_xml_path(path):
            return super().get_component(path)
        # a child without a parent descriptor still resolves; the parent is left partial
        if self.force_ignore.denies(path, is_dir=False):
            return None
        content_root = trim_path_to_content(path, self.type)
        return self._child_for(path, self._parent(os.path.basename(content_root), None, content_root))

    def populate(self, trigger: str, root_xml: Optional[MetadataXml]) -> Optional[SourceComponent]:
        if root_xml is None:
            return None
        content_root = trim_path_to_content(trigger, self.type)
        parent = self._parent(self.calculate_name(root_xml), root_xml.path, content_root)
        if self._child_type_id(trigger) is None:
            return parent
        return self._child_for(trigger, parent)

    def _parent(self, name: str, xml: Optional[str], content_root: str) -> SourceComponent:
        content: Optional[str] = content_root
        if not self.tree.exists(content_root) or not self.tree.is_directory(content_root):
            content = None
        return self.build_component(name, xml=xml, content=content)

    def _child_for(self, trigger: str, parent: SourceComponent) -> SourceComponent:
        for child in parent.get_children():
            if child.xml == trigger:
                return child
        # descriptor hidden from the walk (ignored or outside the content root)
        metadata_xml = parse_metadata_xml(trigger)
        children = self.type.children
        child_type_id = children.suffixes[metadata_xml.suffix]  # type: ignore[union-attr]
        return self.build_component(
            metadata_xml.full_name,  # type: ignore[union-attr]
            xml=trigger,
            metadata_type=children.types[child_type_id],  # type: ignore[union-attr]
            parent=parent,
        )

    def _child_type_id(self, path: str) -> Optional[str]:
        children = self.type.children
        metadata_xml = parse_metadata_xml(path)
        if children is None or metadata_xml is None:
            return None
        return children.suffixes.get(metadata_xml.suffix)
