"""Tests for schema navigation, candidates and the schema registry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from yaml_intelligence.exceptions import SchemaLoadError, SchemaNotFoundError, UnsupportedSchemaError
from yaml_intelligence.schema.completions import KEY, VALUE, make_schema_completions, schema_completions
from yaml_intelligence.schema.navigation import navigate_schema, schema_type
from yaml_intelligence.schema.registry import SchemaRegistry, clear_cache

from tests.conftest import CONFIG_SCHEMA, REGISTRY_DOCUMENT

AUTHOR = CONFIG_SCHEMA["properties"]["authors"]["items"]


def test_schema_type_discriminant() -> None:
    assert schema_type({"anyOf": []}) == "anyOf"
    assert schema_type({"enum": [1]}) == "enum"
    assert schema_type({"type": ["null", "string"]}) == "string"
    assert schema_type({"properties": {}}) == "object"
    assert schema_type({"items": {}}) == "array"
    assert schema_type(True) == "any"


def test_navigate_object_and_array() -> None:
    assert navigate_schema(CONFIG_SCHEMA, []) == [CONFIG_SCHEMA]
    assert navigate_schema(CONFIG_SCHEMA, ["authors", 0]) == [AUTHOR]
    assert navigate_schema(CONFIG_SCHEMA, ["authors", 0, "name"]) == [AUTHOR["properties"]["name"]]


def test_navigate_partial_last_key_returns_enclosing_object() -> None:
    assert navigate_schema(CONFIG_SCHEMA, ["ti"]) == [CONFIG_SCHEMA]
    assert navigate_schema(CONFIG_SCHEMA, ["zzz"]) == []
    # only the last segment may be partial
    assert navigate_schema(CONFIG_SCHEMA, ["ti", "x"]) == []


def test_non_string_segment_against_object() -> None:
    assert navigate_schema(CONFIG_SCHEMA, [3]) == []


def test_any_of_unions_branches() -> None:
    schema = {"anyOf": [{"properties": {"a": {"type": "string"}}}, {"properties": {"a": {"type": "number"}}}]}
    assert navigate_schema(schema, ["a"]) == [{"type": "string"}, {"type": "number"}]


def test_one_of_needs_exactly_one_match() -> None:
    one = {"oneOf": [{"properties": {"a": {"type": "string"}}}, {"properties": {"b": {"type": "number"}}}]}
    assert navigate_schema(one, ["a"]) == [{"type": "string"}]
    both = {"oneOf": [{"properties": {"a": {"type": "string"}}}, {"properties": {"a": {"type": "number"}}}]}
    assert navigate_schema(both, ["a"]) == []


def test_all_of_is_unsupported() -> None:
    with pytest.raises(UnsupportedSchemaError):
        navigate_schema({"allOf": [{"type": "object"}]}, ["a"])


def test_references_resolve_through_identities() -> None:
    schema = {
        "properties": {
            "format": {"$ref": "format-schema"},
            "inline": {"$id": "inline", "enum": ["x"]},
            "again": {"$ref": "inline"},
            "broken": {"$ref": "nowhere"},
        }
    }
    definitions = {"format-schema": {"enum": ["html", "pdf"]}}
    assert navigate_schema(schema, ["format"], definitions) == [{"enum": ["html", "pdf"]}]
    assert navigate_schema(schema, ["broken"], definitions) == []
    recursive = {"$id": "node", "properties": {"child": {"$ref": "node"}, "name": {"type": "string"}}}
    assert navigate_schema(recursive, ["child", "child", "name"]) == [{"type": "string"}]


def test_object_candidates_are_keys_with_continuation_flag() -> None:
    items = schema_completions({"properties": {"echo": {"type": "boolean", "description": "Show code"}}})
    assert [(item.value, item.type, item.suggest_on_accept) for item in items] == [("echo: ", KEY, True)]
    assert items[0].description == "Show code"


def test_value_candidates() -> None:
    assert [item.value for item in schema_completions({"type": "boolean"})] == ["true", "false"]
    assert [item.value for item in schema_completions({"enum": ["a", 1, None]})] == ["a", "1", "null"]
    assert [item.value for item in schema_completions({"completions": ["x", "y"]})] == ["x", "y"]
    assert all(item.type == VALUE for item in schema_completions({"enum": ["a"]}))
    assert schema_completions({"type": "string"}) == []


def test_union_candidates_resolve_references() -> None:
    candidates = make_schema_completions({"fmt": {"enum": ["html"]}})
    items = candidates({"anyOf": [{"$ref": "fmt"}, {"type": "boolean"}]})
    assert [item.value for item in items] == ["html", "true", "false"]


def test_registry_lookup(registry: SchemaRegistry) -> None:
    assert registry.has("config")
    assert registry.get("config") == CONFIG_SCHEMA
    assert registry.language_schema("python") is not None
    assert registry.language_schema("cobol") is None
    with pytest.raises(SchemaNotFoundError):
        registry.get("missing")


def test_registry_collects_definitions() -> None:
    registry = SchemaRegistry.from_document({
        "schemas": {"config": {"properties": {"a": {"$ref": "shared"}}}},
        "definitions": [{"$id": "shared", "type": "boolean"}],
    })
    assert registry.definitions["shared"] == {"$id": "shared", "type": "boolean"}


def test_registry_load_yaml_and_json(tmp_path: Path) -> None:
    clear_cache()
    yaml_file = tmp_path / "schemas.yml"
    yaml_file.write_text(yaml.safe_dump(REGISTRY_DOCUMENT), encoding="utf-8")
    json_file = tmp_path / "schemas.json"
    json_file.write_text(json.dumps(REGISTRY_DOCUMENT), encoding="utf-8")

    from_yaml = SchemaRegistry.load(yaml_file)
    from_json = SchemaRegistry.load(json_file)
    assert from_yaml.schemas == from_json.schemas
    assert SchemaRegistry.load(yaml_file) is from_yaml
    clear_cache()


def test_registry_load_errors(tmp_path: Path) -> None:
    clear_cache()
    with pytest.raises(SchemaLoadError):
        SchemaRegistry.load(tmp_path / "missing.yml")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(SchemaLoadError):
        SchemaRegistry.load(broken)

    not_mapping = tmp_path / "list.yml"
    not_mapping.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(SchemaLoadError):
        SchemaRegistry.load(not_mapping)
