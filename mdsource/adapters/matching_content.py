"""Adapter for types whose content file carries the type's own suffix."""

from __future__ import annotations

from typing import Optional

from ..component import SourceComponent
from ..models import MetadataXml
from ..utils import META_XML_SUFFIX, ext_name
from .base import SourceAdapter, logger


class MatchingContentSourceAdapter(SourceAdapter):
    """`<name>.<suffix>` content next to `<name>.<suffix>-meta.xml`.

    Example::

        classes/
        ├── MyClass.cls
        └── MyClass.cls-meta.xml
    """

    def get_root_metadata_xml_path(self, trigger: str) -> Optional[str]:
        candidate = f"{trigger}{META_XML_SUFFIX}"
        return candidate if self.tree.exists(candidate) else None

    def populate(self, trigger: str, root_xml: Optional[MetadataXml]) -> Optional[SourceComponent]:
        if root_xml is None:
            logger.debug("No descriptor found for %s", trigger)
            return None

        content: Optional[str] = None
        if trigger == root_xml.path:
            candidate = trigger[: -len(META_XML_SUFFIX)]
            if self.tree.exists(candidate):
                content = candidate
        elif ext_name(trigger) == self.type.suffix:
            content = trigger

        if content is None:
            logger.debug("Expected content file for %s was not found", root_xml.path)
        elif self.force_ignore.denies(content, is_dir=False):
            logger.debug("Content %s is ignored", content)
            content = None
        return self.build_component(self.calculate_name(root_xml), xml=root_xml.path, content=content)
