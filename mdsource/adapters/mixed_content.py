"""Adapter for types whose content may be a directory or a file of any suffix."""

from __future__ import annotations

import os
from typing import Optional

from ..component import SourceComponent
from ..models import MetadataXml
from ..utils import base_name, trim_path_to_content
from .base import SourceAdapter, logger


class MixedContentSourceAdapter(SourceAdapter):
    """Content lives beside the descriptor and may carry an arbitrary suffix.

    A content directory belongs to the component as a whole: nothing below it is
    resolved separately.

    Example::

        staticresources/
        ├── bundle/
        │   └── app.js
        ├── bundle.resource-meta.xml
        ├── logo.png
        └── logo.resource-meta.xml
    """

    # descriptor lives inside the content directory instead of beside it
    own_folder = False

    def get_root_metadata_xml_path(self, trigger: str) -> Optional[str]:
        content_root = trim_path_to_content(trigger, self.type)
        if self.own_folder:
            if not self.tree.exists(content_root) or not self.tree.is_directory(content_root):
                return None
            return self.tree.find_metadata_xml(content_root, os.path.basename(content_root))
        return self.tree.find_metadata_xml(os.path.dirname(content_root), base_name(content_root))

    def populate(self, trigger: str, root_xml: Optional[MetadataXml]) -> Optional[SourceComponent]:
        if root_xml is None:
            logger.debug("No descriptor found for content %s", trigger)
            return None

        content: Optional[str] = trim_path_to_content(trigger, self.type)
        if content == root_xml.path:
            content = self.tree.find_content(os.path.dirname(root_xml.path), root_xml.full_name)
        if content is not None and not self.tree.exists(content):
            content = None
        return self.build_component(self.calculate_name(root_xml), xml=root_xml.path, content=content)
