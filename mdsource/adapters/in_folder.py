"""Adapter for folder-scoped types and their folder types."""

from __future__ import annotations

from typing import Optional

from ..component import SourceComponent
from ..models import MetadataType
from ..utils import parent_name, parse_metadata_xml
from .base import logger
from .default import DefaultSourceAdapter


class InFolderSourceAdapter(DefaultSourceAdapter):
    """Components live in named folders directly under the type directory.

    Example::

        reports/
        ├── Sales/
        │   └── Pipeline.report-meta.xml
        └── Sales.reportFolder-meta.xml

    A descriptor placed directly in the type directory describes a folder. It
    resolves to the folder type and owns only that descriptor: the folder's
    members are components of their own.
    """

    def get_component(self, path: str) -> Optional[SourceComponent]:
        metadata_xml = parse_metadata_xml(path)
        folder_type = self._folder_type()
        if metadata_xml is None or folder_type is None:
            return super().get_component(path)
        is_folder_type = folder_type == self.type
        if not is_folder_type and parent_name(path) != self.type.directory_name:
            return super().get_component(path)

        if self.force_ignore.denies(path, is_dir=False):
            logger.debug("Folder descriptor %s is ignored", path)
            return None
        return self.build_component(metadata_xml.full_name, xml=path, metadata_type=folder_type)

    def _folder_type(self) -> Optional[MetadataType]:
        if self.type.folder_content_type:
            return self.type
        return self.registry.get_folder_type(self.type)
