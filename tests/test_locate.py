"""Tests for the structural and indentation cursor locators."""

from __future__ import annotations

from yaml_intelligence.locate.cursor import locate_cursor
from yaml_intelligence.locate.indentation import locate_from_indentation, yaml_indent_tree
from yaml_intelligence.parsing.annotated_yaml import read_annotated_yaml
from yaml_intelligence.parsing.reparse import Position
from yaml_intelligence.text.mapped_text import row_col_to_index


def test_locate_key_and_value() -> None:
    root = read_annotated_yaml("a:\n  b: 1\n")
    assert locate_cursor(root, 6).path == ["a", "b"]
    assert locate_cursor(root, 9).path == ["a", "b", 1]


def test_locate_in_sequence() -> None:
    root = read_annotated_yaml("items:\n  - x\n  - y\n")
    assert locate_cursor(root, 17).path == ["items", 1, "y"]
    # between two items: the previous one
    assert locate_cursor(root, 14).path == ["items", 0]
    # before the first item
    assert locate_cursor(root, 10).path == ["items"]


def test_locate_outside_all_pairs_sets_error_flag() -> None:
    root = read_annotated_yaml("a: 1\n\nb: 2\n")
    location = locate_cursor(root, 5)
    assert location.with_error
    assert location.path == []


def test_locate_in_clean_scalar_has_no_error_flag() -> None:
    location = locate_cursor(read_annotated_yaml("a: 1\n"), 4)
    assert not location.with_error
    assert location.path == ["a", 1]


def test_structural_and_indentation_locators_agree() -> None:
    code = "a:\n  b:\n    c: 1\n"
    position = Position(1, 3)
    structural = locate_cursor(read_annotated_yaml(code), row_col_to_index(code, position.row, position.column))
    assert structural.path == ["a", "b"]
    assert locate_from_indentation(code, position) == ["a", "b"]


def test_indent_tree_predecessors() -> None:
    tree = yaml_indent_tree(["a:", "  b: 1", "  c:", "    d: 2", "e: 3"])
    assert tree.predecessor == [-1, 0, 0, 2, -1]
    assert tree.indentation == [0, 2, 2, 4, 0]


def test_blank_line_after_nested_block() -> None:
    assert locate_from_indentation("a:\n  b: 1\n  ", Position(2, 2)) == ["a"]


def test_blank_line_inside_deeper_block() -> None:
    assert locate_from_indentation("a:\n  b:\n    ", Position(2, 4)) == ["a", "b"]


def test_sequence_item_line() -> None:
    assert locate_from_indentation("items:\n  - ", Position(1, 4)) == ["items", 0]


def test_unrecognized_line_invalidates() -> None:
    assert locate_from_indentation("key value\n  ", Position(1, 2)) is None


def test_row_outside_document() -> None:
    assert locate_from_indentation("a:\n", Position(7, 0)) is None
