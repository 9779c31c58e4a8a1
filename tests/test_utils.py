"""Tests for mdsource.utils path helpers."""

from __future__ import annotations

import os

from mdsource.utils import base_name, ext_name, parent_name, parse_metadata_xml, trim_path_to_content


def test_parse_metadata_xml_extracts_name_and_suffix() -> None:
    path = os.path.join("classes", "MyClass.cls-meta.xml")

    parsed = parse_metadata_xml(path)

    assert parsed is not None
    assert parsed.full_name == "MyClass"
    assert parsed.suffix == "cls"
    assert parsed.path == path


def test_parse_metadata_xml_keeps_dots_in_full_name() -> None:
    parsed = parse_metadata_xml(os.path.join("layouts", "Account.Sales.layout-meta.xml"))

    assert parsed is not None
    assert parsed.full_name == "Account.Sales"
    assert parsed.suffix == "layout"


def test_parse_metadata_xml_rejects_content_files() -> None:
    assert parse_metadata_xml(os.path.join("classes", "MyClass.cls")) is None
    assert parse_metadata_xml(os.path.join("classes", "notes-meta.xml")) is None


def test_name_helpers() -> None:
    path = os.path.join("pkg", "classes", "MyClass.cls-meta.xml")

    assert base_name(path) == "MyClass"
    assert ext_name(path) == "xml"
    assert ext_name(os.path.join("pkg", "Makefile")) is None
    assert parent_name(path) == "classes"


def test_trim_path_to_content_stops_below_type_directory(registry) -> None:
    staticresource = registry.get_type_by_name("StaticResource")
    path = os.path.join("pkg", "staticresources", "bundle", "js", "app.js")

    assert trim_path_to_content(path, staticresource) == os.path.join("pkg", "staticresources", "bundle")


def test_trim_path_to_content_skips_folder_for_folder_scoped_types(registry) -> None:
    document = registry.get_type_by_name("Document")
    path = os.path.join("pkg", "documents", "Marketing", "logo", "x.png")

    assert trim_path_to_content(path, document) == os.path.join("pkg", "documents", "Marketing", "logo")


def test_trim_path_to_content_returns_path_outside_type_directory(registry) -> None:
    staticresource = registry.get_type_by_name("StaticResource")
    path = os.path.join("pkg", "other", "file.txt")

    assert trim_path_to_content(path, staticresource) == path
