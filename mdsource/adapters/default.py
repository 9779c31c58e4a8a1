"""Adapter for types made of a descriptor and an optional sibling content file."""

from __future__ import annotations

import os
from typing import Optional

from ..component import SourceComponent
from ..models import MetadataXml
from ..utils import base_name
from .base import SourceAdapter, logger


class DefaultSourceAdapter(SourceAdapter):
    """Pairs a descriptor with a sibling content file in the same directory.

    Either file may trigger resolution; the other is located by name.
    """

    def get_root_metadata_xml_path(self, trigger: str) -> Optional[str]:
        return self.tree.find_metadata_xml(os.path.dirname(trigger), base_name(trigger))

    def populate(self, trigger: str, root_xml: Optional[MetadataXml]) -> Optional[SourceComponent]:
        if root_xml is None:
            logger.debug("No descriptor found for %s", trigger)
            return None
        if trigger == root_xml.path:
            content = self.tree.find_content(os.path.dirname(trigger), root_xml.full_name)
        else:
            content = trigger
        return self.build_component(self.calculate_name(root_xml), xml=root_xml.path, content=content)
