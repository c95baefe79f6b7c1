"""Shared fixtures: a small schema registry covering objects, arrays, enums and unions."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from yaml_intelligence.automation.dispatcher import YamlIntelligence
from yaml_intelligence.parsing.tree_sitter_yaml import ConcreteTree, get_yaml_parser
from yaml_intelligence.schema.registry import SchemaRegistry

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "Document title"},
        "echo": {"type": "boolean"},
        "theme": {"enum": ["cosmo", "darkly", "flatly"]},
        "execute": {
            "type": "object",
            "properties": {
                "echo": {"type": "boolean"},
                "warning": {"type": "boolean"},
            },
        },
        "authors": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "email": {"type": "string"},
                },
            },
        },
    },
}

CELL_OPTIONS_SCHEMA = {
    "type": "object",
    "properties": {
        "echo": {"type": "boolean"},
        "fig-cap": {"type": "string"},
        "layout": {"enum": ["row", "column"]},
    },
}

REGISTRY_DOCUMENT = {
    "schemas": {
        "config": CONFIG_SCHEMA,
        "front-matter": CONFIG_SCHEMA,
    },
    "languages": {
        "python": {"schema": CELL_OPTIONS_SCHEMA},
        "r": {"schema": CELL_OPTIONS_SCHEMA},
    },
}


class _ErrorRoot:
    """A real root node reported as an ``ERROR`` node."""

    type = "ERROR"

    def __init__(self, node: Any):
        self._node = node

    def __getattr__(self, name: str) -> Any:
        return getattr(self._node, name)


class ErrorRootParser:
    """Real YAML parser whose root becomes an error node for selected texts."""

    def __init__(self, is_error: Callable[[str], bool]):
        self._parser = get_yaml_parser()
        self._is_error = is_error

    def parse(self, text: str) -> ConcreteTree:
        tree = self._parser.parse(text)
        if self._is_error(text):
            return ConcreteTree(_ErrorRoot(tree.root), text)
        return tree


def unclosed_bracket(text: str) -> bool:
    return text.count("[") > text.count("]")


@pytest.fixture
def registry() -> SchemaRegistry:
    return SchemaRegistry.from_document(REGISTRY_DOCUMENT)


@pytest.fixture
def intelligence(registry: SchemaRegistry) -> YamlIntelligence:
    return YamlIntelligence(registry)
