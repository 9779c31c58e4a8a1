"""Tests for ComponentSet aggregation, filtering and manifest output."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mdsource.component import SourceComponent
from mdsource.component_set import ComponentSet
from mdsource.errors import NoComponentsToRetrieveError, NoSourceToDeployError
from mdsource.manifest import PackageTypeMembers
from mdsource.models import MetadataComponent
from mdsource.tree import NodeFSTreeContainer
from tests._fixtures.project_builder import PACKAGE_DIR, ProjectBuilder


def _member(registry, full_name: str, type_name: str) -> MetadataComponent:
    return MetadataComponent(full_name=full_name, type=registry.get_type_by_name(type_name))


def _keys(component_set: ComponentSet) -> list[tuple[str, str]]:
    return [(component.type.id, component.full_name) for component in component_set]


def test_from_source_collects_components(sample_project: ProjectBuilder) -> None:
    component_set = ComponentSet.from_source(sample_project.source(), registry=sample_project.registry)

    assert component_set.size == 5
    assert len(component_set) == 5
    assert component_set.has_source_components()
    assert _member(sample_project.registry, "MyClass", "ApexClass") in component_set


def test_size_counts_components_while_iteration_counts_sources(project_builder: ProjectBuilder) -> None:
    project_builder.touch(
        [
            os.path.join("pkg-a", "classes", "MyClass.cls-meta.xml"),
            os.path.join("pkg-b", "classes", "MyClass.cls-meta.xml"),
        ]
    )
    component_set = ComponentSet(registry=project_builder.registry)

    component_set.resolve_source_components(project_builder.path("pkg-a"))
    component_set.resolve_source_components(project_builder.path("pkg-b"))

    assert component_set.size == 1
    assert len(list(component_set)) == 2
    assert len(list(component_set.get_source_components())) == 2


def test_has_accepts_type_names(registry) -> None:
    component_set = ComponentSet([_member(registry, "MyClass", "ApexClass")], registry)

    assert component_set.has(MetadataComponent("MyClass", "ApexClass"))  # type: ignore[arg-type]
    assert not component_set.has(MetadataComponent("Other", "ApexClass"))  # type: ignore[arg-type]


def test_wildcard_filter_selects_whole_type(sample_project: ProjectBuilder) -> None:
    registry = sample_project.registry
    component_set = ComponentSet(registry=registry)

    added = component_set.resolve_source_components(
        sample_project.source(), filter_set=[_member(registry, "*", "StaticResource")]
    )

    assert _keys(component_set) == [("staticresource", "bundle"), ("staticresource", "logo")]
    assert added.size == 2


def test_filter_on_child_adds_only_that_child(sample_project: ProjectBuilder) -> None:
    registry = sample_project.registry
    component_set = ComponentSet(registry=registry)

    component_set.resolve_source_components(
        sample_project.source(), filter_set=[_member(registry, "Account.Rating__c", "CustomField")]
    )

    assert _keys(component_set) == [("customfield", "Account.Rating__c")]


def test_filter_on_parent_keeps_parent(sample_project: ProjectBuilder) -> None:
    registry = sample_project.registry
    component_set = ComponentSet(registry=registry)

    component_set.resolve_source_components(
        sample_project.source(), filter_set=ComponentSet([_member(registry, "Account", "CustomObject")], registry)
    )

    assert _keys(component_set) == [("customobject", "Account")]


def test_get_source_components_finds_children_through_parent(sample_project: ProjectBuilder) -> None:
    registry = sample_project.registry
    component_set = ComponentSet.from_source(sample_project.source("objects"), registry=registry)

    found = list(component_set.get_source_components(_member(registry, "Account.Rating__c", "CustomField")))

    assert [component.full_name for component in found] == ["Account.Rating__c"]
    assert found[0].parent.full_name == "Account"


def test_get_object_groups_folder_types_under_content_type(registry) -> None:
    component_set = ComponentSet(
        [
            _member(registry, "Sales", "ReportFolder"),
            _member(registry, "MyClass", "ApexClass"),
            _member(registry, "Sales/Pipeline", "Report"),
        ],
        registry,
    )

    manifest = component_set.get_object()

    assert manifest.version == "50.0"
    assert manifest.types == [
        PackageTypeMembers("Report", ["Sales", "Sales/Pipeline"]),
        PackageTypeMembers("ApexClass", ["MyClass"]),
    ]


MANIFEST = """<?xml version="1.0" encoding="UTF-8"?>
<Package xmlns="http://soap.sforce.com/2006/04/metadata">
    <types>
        <members>*</members>
        <name>ApexClass</name>
    </types>
    <types>
        <members>Account</members>
        <name>CustomObject</name>
    </types>
    <version>52.0</version>
</Package>
"""


def test_from_manifest_file_round_trips(tmp_path: Path, registry) -> None:
    manifest_path = tmp_path / "package.xml"
    manifest_path.write_text(MANIFEST, encoding="utf-8")

    component_set = ComponentSet.from_manifest_file(str(manifest_path), registry=registry)

    assert component_set.api_version == "52.0"
    assert component_set.size == 2
    assert not component_set.has_source_components()
    assert component_set.get_package_xml() == MANIFEST


def test_from_manifest_file_resolves_members(sample_project: ProjectBuilder) -> None:
    sample_project.write({"package.xml": MANIFEST})

    component_set = ComponentSet.from_manifest_file(
        sample_project.path("package.xml"),
        resolve=sample_project.source(),
        registry=sample_project.registry,
    )

    assert _keys(component_set) == [("customobject", "Account"), ("apexclass", "MyClass")]
    assert not component_set.has(_member(sample_project.registry, "*", "ApexClass"))


def test_from_manifest_file_keeps_literal_wildcard(sample_project: ProjectBuilder) -> None:
    sample_project.write({"package.xml": MANIFEST})

    component_set = ComponentSet.from_manifest_file(
        sample_project.path("package.xml"),
        resolve=[sample_project.source()],
        literal_wildcard=True,
        registry=sample_project.registry,
    )

    assert component_set.size == 3
    assert component_set.has(_member(sample_project.registry, "*", "ApexClass"))


def test_deploy_requires_source_components(registry) -> None:
    with pytest.raises(NoSourceToDeployError):
        ComponentSet(registry=registry).get_deploy_components()
    with pytest.raises(NoSourceToDeployError):
        ComponentSet([_member(registry, "MyClass", "ApexClass")], registry).get_deploy_components()


def test_retrieve_request(registry) -> None:
    empty = ComponentSet(registry=registry)
    with pytest.raises(NoComponentsToRetrieveError):
        empty.get_retrieve_request()

    by_package = empty.get_retrieve_request(["MyPackage"])
    assert by_package["package_names"] == ["MyPackage"]
    assert by_package["unpackaged"].types == []

    request = ComponentSet([_member(registry, "MyClass", "ApexClass")], registry).get_retrieve_request()
    assert request["api_version"] == "50.0"
    assert request["unpackaged"].types == [PackageTypeMembers("ApexClass", ["MyClass"])]


def test_deploy_components_returns_every_source(sample_project: ProjectBuilder) -> None:
    component_set = ComponentSet.from_source(
        sample_project.path(PACKAGE_DIR, "classes"), registry=sample_project.registry
    )

    (component,) = component_set.get_deploy_components()
    assert component.content == sample_project.source("classes", "MyClass.cls")


def test_get_object_keeps_insertion_order_within_type(registry) -> None:
    component_set = ComponentSet(
        [_member(registry, "Foo", "ApexClass"), _member(registry, "Bar", "ApexClass")], registry
    )

    assert component_set.get_object().types == [PackageTypeMembers("ApexClass", ["Foo", "Bar"])]


def test_filter_on_parent_includes_independently_resolved_child(sample_project: ProjectBuilder) -> None:
    registry = sample_project.registry
    component_set = ComponentSet(registry=registry)

    added = component_set.resolve_source_components(
        sample_project.source("objects", "Account", "fields"),
        filter_set=[_member(registry, "Account", "CustomObject")],
    )

    assert _keys(added) == [("customfield", "Account.Rating__c")]
    assert _keys(component_set) == [("customfield", "Account.Rating__c")]


def test_filter_on_unrelated_parent_excludes_child(sample_project: ProjectBuilder) -> None:
    registry = sample_project.registry
    component_set = ComponentSet(registry=registry)

    added = component_set.resolve_source_components(
        sample_project.source("objects", "Account", "fields"),
        filter_set=[_member(registry, "Contact", "CustomObject")],
    )

    assert added.size == 0
    assert component_set.size == 0


def test_manifest_wildcard_on_folder_type_selects_content_type(sample_project: ProjectBuilder) -> None:
    sample_project.touch(
        os.path.join(PACKAGE_DIR, "reports", relative)
        for relative in ("Sales.reportFolder-meta.xml", "Sales/Pipeline.report-meta.xml")
    )
    sample_project.write(
        {
            "package.xml": """
            <?xml version="1.0" encoding="UTF-8"?>
            <Package xmlns="http://soap.sforce.com/2006/04/metadata">
                <types>
                    <members>*</members>
                    <name>Report</name>
                </types>
                <version>52.0</version>
            </Package>
            """
        }
    )

    component_set = ComponentSet.from_manifest_file(
        sample_project.path("package.xml"),
        resolve=sample_project.source("reports"),
        registry=sample_project.registry,
    )

    assert _keys(component_set) == [("report", "Sales/Pipeline")]


def test_sources_differing_only_in_xml_and_content_are_distinct(registry) -> None:
    apex_class = registry.get_type_by_name("ApexClass")
    tree = NodeFSTreeContainer()
    component_set = ComponentSet(registry=registry)

    component_set.add(SourceComponent("MyClass", apex_class, tree, xml=None, content="X"))
    component_set.add(SourceComponent("MyClass", apex_class, tree, xml="X", content=None))

    assert component_set.size == 1
    assert len(list(component_set.get_source_components())) == 2
