from __future__ import annotations

import os
from pathlib import Path

import pytest

from mdsource.registry import RegistryAccess
from tests._fixtures.project_builder import PACKAGE_DIR, ProjectBuilder


@pytest.fixture
def registry() -> RegistryAccess:
    """Return the bundled default registry."""
    return RegistryAccess()


@pytest.fixture
def mock_registry() -> RegistryAccess:
    """Return a two-type registry independent of the bundled data."""
    return RegistryAccess(
        {
            "api_version": "42.0",
            "types": {
                "kitten": {"id": "kitten", "name": "Kitten", "directory_name": "kittens", "suffix": "kitten"},
                "yarn": {"id": "yarn", "name": "Yarn", "directory_name": "yarns", "suffix": "yarn"},
            },
            "suffixes": {"kitten": "kitten", "yarn": "yarn"},
            "mixed_content": {"yarns": "yarn"},
            "adapters": {"yarn": "mixedContent"},
        }
    )


@pytest.fixture
def project_builder(tmp_path: Path, registry: RegistryAccess) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path, registry)


@pytest.fixture
def sample_project(project_builder: ProjectBuilder) -> ProjectBuilder:
    """A project covering every bundled adapter."""
    project_builder.touch(
        os.path.join(PACKAGE_DIR, relative)
        for relative in (
            "classes/MyClass.cls",
            "classes/MyClass.cls-meta.xml",
            "layouts/Account-Layout.layout-meta.xml",
            "objects/Account/Account.object-meta.xml",
            "objects/Account/fields/Rating__c.field-meta.xml",
            "objects/Account/listViews/All.listView-meta.xml",
            "staticresources/bundle/js/app.js",
            "staticresources/bundle.resource-meta.xml",
            "staticresources/logo.png",
            "staticresources/logo.resource-meta.xml",
        )
    )
    return project_builder
