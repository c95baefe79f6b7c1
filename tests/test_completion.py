"""Tests for turning schemas into completion lists."""

from __future__ import annotations

import pytest

from yaml_intelligence.automation.completion import CompletionResult, NoResult, completions
from yaml_intelligence.schema.completions import KEY, VALUE

from tests.conftest import CONFIG_SCHEMA


def test_top_level_keys_sorted_with_continuations() -> None:
    result = completions(CONFIG_SCHEMA, [], "")
    assert isinstance(result, CompletionResult)
    assert [item.value for item in result.completions] == [
        "authors:\n  - ",
        "echo: ",
        "execute:\n  ",
        "theme: ",
        "title: ",
    ]
    assert all(item.type == KEY for item in result.completions)
    assert result.cacheable


def test_partial_key_filters_by_prefix() -> None:
    result = completions(CONFIG_SCHEMA, ["ti"], "ti")
    assert [item.value for item in result.completions] == ["title: "]
    assert result.token == "ti"


def test_enum_values() -> None:
    result = completions(CONFIG_SCHEMA, ["theme"], "")
    assert [item.value for item in result.completions] == ["cosmo", "darkly", "flatly"]
    assert all(item.type == VALUE for item in result.completions)


def test_nothing_matches() -> None:
    assert completions(CONFIG_SCHEMA, [], "zzz") is NoResult.NO_COMPLETIONS
    assert completions(CONFIG_SCHEMA, ["unknown", "deeper"], "") is NoResult.NO_COMPLETIONS


def test_continuation_uses_indent_and_comment_prefix() -> None:
    result = completions(CONFIG_SCHEMA, ["ex"], "ex", indent=2, comment_prefix="#| ")
    assert [item.value for item in result.completions] == ["execute:\n#|     "]


@pytest.mark.parametrize("word", ["", "a", "e", "ex", "t", "th", "title", "q"])
def test_every_completion_starts_with_word(word: str) -> None:
    result = completions(CONFIG_SCHEMA, [word] if word else [], word)
    if result is NoResult.NO_COMPLETIONS:
        return
    values = [item.value for item in result.completions]
    assert all(value.startswith(word) for value in values)
    assert values == sorted(values)


def test_only_keeps_one_kind() -> None:
    result = completions(CONFIG_SCHEMA, [], "")
    assert result.only(VALUE) is NoResult.NO_COMPLETIONS
    assert len(result.only(KEY).completions) == 5
