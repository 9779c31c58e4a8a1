"""Helper utilities for constructing temporary metadata projects in tests."""

from __future__ import annotations

import os
import textwrap
from pathlib import Path
from typing import Iterable, Mapping

from mdsource.component import SourceComponent
from mdsource.registry import RegistryAccess
from mdsource.resolver import MetadataResolver

PACKAGE_DIR = os.path.join("force-app", "main", "default")


class ProjectBuilder:
    """Utility for writing files into a throwaway project and resolving it."""

    def __init__(self, tmp_path: Path, registry: RegistryAccess) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()
        self.registry = registry

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def touch(self, paths: Iterable[str]) -> None:
        """Create empty files at every relative path."""
        self.write({relative: "" for relative in paths})

    def path(self, *parts: str) -> str:
        """Return the absolute path of `parts` below the project root."""
        return str(self.root.joinpath(*parts))

    def source(self, *parts: str) -> str:
        """Return the absolute path of `parts` below the default package directory."""
        return self.path(PACKAGE_DIR, *parts)

    def resolve(self, *parts: str) -> list[SourceComponent]:
        """Resolve components below the default package directory."""
        return MetadataResolver(self.registry).get_components_from_path(self.source(*parts))


__all__ = ["PACKAGE_DIR", "ProjectBuilder"]
