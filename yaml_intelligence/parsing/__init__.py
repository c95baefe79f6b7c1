"""Concrete YAML parsing and the annotated tree built on top of it."""

from .annotated_yaml import AnnotatedNode, build_annotated, node_at_path, read_annotated_yaml
from .reparse import ParseCandidate, Position, attempt_parses_at_line
from .tree_sitter_yaml import ConcreteTree, YamlParser, get_yaml_parser

__all__ = [
    "AnnotatedNode",
    "build_annotated",
    "node_at_path",
    "read_annotated_yaml",
    "ParseCandidate",
    "Position",
    "attempt_parses_at_line",
    "ConcreteTree",
    "YamlParser",
    "get_yaml_parser",
]
