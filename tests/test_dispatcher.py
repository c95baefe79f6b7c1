"""End-to-end tests for completion and lint requests."""

from __future__ import annotations

import asyncio
from typing import List

import pytest

from yaml_intelligence.automation.cells import CODE, MARKDOWN, RAW, Cell
from yaml_intelligence.automation.completion import CompletionResult, NoResult
from yaml_intelligence.automation.dispatcher import EditorContext, YamlIntelligence
from yaml_intelligence.exceptions import UnsupportedCellKindError
from yaml_intelligence.parsing.reparse import Position
from yaml_intelligence.schema.registry import SchemaRegistry
from yaml_intelligence.text.mapped_text import as_mapped_text, mapped_text

from tests.conftest import CONFIG_SCHEMA, ErrorRootParser, unclosed_bracket


def _values(result) -> List[str]:
    assert isinstance(result, CompletionResult), result
    return [item.value for item in result.completions]


async def _complete(intelligence: YamlIntelligence, code: str, row: int, column: int, **kwargs):
    context = EditorContext(filetype=kwargs.pop("filetype", "yaml"), code=code, position=Position(row, column), **kwargs)
    return await intelligence.get_completions(context)


async def test_blank_line_inside_nested_mapping(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "title: x\nexecute:\n  ", 2, 2)
    assert _values(result) == ["echo: ", "warning: "]


async def test_blank_line_completion_uses_indentation_path() -> None:
    registry = SchemaRegistry.from_document({"schemas": {"config": {
        "type": "object",
        "properties": {"a": {"type": "object", "properties": {"b": {"type": "number"}, "c": {"type": "boolean"}}}},
    }}})
    result = await _complete(YamlIntelligence(registry), "a:\n  b: 1\n  ", 2, 2)
    assert _values(result) == ["b: ", "c: "]


def _bare_word_line(text: str) -> bool:
    return any(line.strip() and ":" not in line for line in text.split("\n"))


async def test_partial_key_completed_after_truncating_cursor_line(registry: SchemaRegistry) -> None:
    intelligence = YamlIntelligence(registry, parser=ErrorRootParser(_bare_word_line))
    result = await _complete(intelligence, "title: x\nec", 1, 2)
    assert _values(result) == ["echo: "]
    assert result.completions[0].type == "key"


async def test_partial_nested_key(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "execute:\n  wa", 1, 4)
    assert _values(result) == ["warning: "]


async def test_partial_value_completes_enum(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "theme: da", 0, 9)
    assert _values(result) == ["darkly"]
    assert result.token == "da"


async def test_value_after_colon(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "echo: ", 0, 6)
    assert _values(result) == ["false", "true"]


async def test_value_completed_below_malformed_line(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "execute:\n  echo: [1\ntheme: ", 2, 7)
    assert _values(result) == ["cosmo", "darkly", "flatly"]


async def test_value_after_colon_in_nested_mapping(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "execute:\n  echo: ", 1, 8)
    assert _values(result) == ["false", "true"]


async def test_object_key_continues_on_next_line(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "exe", 0, 3)
    assert _values(result) == ["execute:\n  "]


async def test_no_matching_candidate(intelligence: YamlIntelligence) -> None:
    assert await _complete(intelligence, "zzz", 0, 3) is NoResult.NO_COMPLETIONS


async def test_fence_lines_are_not_completed(intelligence: YamlIntelligence) -> None:
    code = "---\ntitle: x\n---\n"
    assert await _complete(intelligence, code, 0, 2, path="index.qmd") is NoResult.NOT_ATTEMPTED
    assert await _complete(intelligence, code, 2, 1, path="index.qmd") is NoResult.NOT_ATTEMPTED


async def test_completion_between_fences(intelligence: YamlIntelligence) -> None:
    result = await _complete(intelligence, "---\nth\n---\n", 1, 2, path="index.qmd")
    assert _values(result) == ["theme: "]


async def test_unknown_filetype_and_missing_schema(intelligence: YamlIntelligence) -> None:
    assert await _complete(intelligence, "a", 0, 1, filetype="toml") is NoResult.NOT_ATTEMPTED
    assert await _complete(intelligence, "a", 0, 1, schema_name="nope") is NoResult.NOT_ATTEMPTED
    assert await intelligence.get_lint(EditorContext(filetype="toml", code="a")) == []


async def test_script_with_fence_line(intelligence: YamlIntelligence) -> None:
    code = "```{python}\n#| echo: fa\nprint(1)\n```"
    result = await _complete(intelligence, code, 1, 11, filetype="script")
    assert _values(result) == ["false"]


async def test_script_with_declared_language(intelligence: YamlIntelligence) -> None:
    code = "#| layout: r\nprint(1)\n"
    result = await _complete(intelligence, code, 0, 12, filetype="script", language="python")
    assert _values(result) == ["row"]


async def test_script_cursor_outside_options(intelligence: YamlIntelligence) -> None:
    code = "#| echo: true\nprint(1)\n"
    result = await _complete(intelligence, code, 1, 3, filetype="script", language="python")
    assert result is NoResult.NOT_ATTEMPTED


async def test_script_key_continuation_keeps_comment_prefix() -> None:
    registry = SchemaRegistry.from_document({"languages": {"python": {"schema": {
        "type": "object",
        "properties": {"fig": {"type": "object", "properties": {"width": {"type": "number"}}}},
    }}}})
    result = await _complete(YamlIntelligence(registry), "#| fi\nx = 1\n", 0, 5, filetype="script", language="python")
    assert _values(result) == ["fig:\n#|   "]


def _notebook(document: str) -> List[Cell]:
    raw_end = document.index("---", 3) + 3
    text_start = raw_end + 1
    text_end = document.index("\n", text_start)
    code_start = document.index("\n", document.index("```{python}")) + 1
    code_end = document.rindex("\n```")
    return [
        Cell(RAW, mapped_text(document, [(0, raw_end)])),
        Cell(MARKDOWN, mapped_text(document, [(text_start, text_end)])),
        Cell(CODE, mapped_text(document, [(code_start, code_end)]), language="python"),
    ]


NOTEBOOK = "---\ntheme: da\n---\nSome text\n```{python}\n#| layout: r\nprint(1)\n```\n"


async def test_markdown_code_cell_completion(intelligence: YamlIntelligence) -> None:
    context = EditorContext(filetype="markdown", code=NOTEBOOK, position=Position(5, 12), cells=_notebook(NOTEBOOK))
    assert _values(await intelligence.get_completions(context)) == ["row"]


async def test_markdown_front_matter_completion(intelligence: YamlIntelligence) -> None:
    context = EditorContext(filetype="markdown", code=NOTEBOOK, position=Position(1, 9), cells=_notebook(NOTEBOOK))
    assert _values(await intelligence.get_completions(context)) == ["darkly"]


async def test_markdown_text_cell_is_not_completed(intelligence: YamlIntelligence) -> None:
    context = EditorContext(filetype="markdown", code=NOTEBOOK, position=Position(3, 2), cells=_notebook(NOTEBOOK))
    assert await intelligence.get_completions(context) is NoResult.NOT_ATTEMPTED


async def test_unknown_cell_kind_raises(intelligence: YamlIntelligence) -> None:
    cells = [Cell("widget", as_mapped_text("x"))]
    context = EditorContext(filetype="markdown", code="x", position=Position(0, 1), cells=cells)
    with pytest.raises(UnsupportedCellKindError):
        await intelligence.get_completions(context)


async def test_lint_yaml(intelligence: YamlIntelligence) -> None:
    code = "title: Hello\necho: maybe\n"
    diagnostics = await intelligence.get_lint(EditorContext(filetype="yaml", code=code))
    assert [code[d.start:d.end] for d in diagnostics] == ["maybe"]


async def test_lint_truncates_broken_last_line(registry: SchemaRegistry) -> None:
    intelligence = YamlIntelligence(registry, parser=ErrorRootParser(unclosed_bracket))
    code = "echo: maybe\nextra: ["
    diagnostics = await intelligence.get_lint(EditorContext(filetype="yaml", code=code))
    assert [d.yaml_path for d in diagnostics] == ["/echo"]


async def test_lint_with_malformed_line_above(intelligence: YamlIntelligence) -> None:
    code = "execute:\n  echo: [1\ntheme: nope"
    diagnostics = await intelligence.get_lint(EditorContext(filetype="yaml", code=code))
    assert "/theme" in [d.yaml_path for d in diagnostics]
    assert "nope" in [code[d.start:d.end] for d in diagnostics]


async def test_lint_keeps_non_json_constants_as_text(intelligence: YamlIntelligence) -> None:
    assert await intelligence.get_lint(EditorContext(filetype="yaml", code="title: NaN\n")) == []


async def test_lint_empty_document(intelligence: YamlIntelligence) -> None:
    assert await intelligence.get_lint(EditorContext(filetype="yaml", code="\n")) == []


async def test_lint_markdown_cells(intelligence: YamlIntelligence) -> None:
    document = NOTEBOOK.replace("theme: da", "theme: neon").replace("layout: r", "layout: diagonal")
    context = EditorContext(filetype="markdown", code=document, cells=_notebook(document))
    diagnostics = await intelligence.get_lint(context)
    assert sorted(document[d.start:d.end] for d in diagnostics) == ["diagonal", "neon"]


async def test_concurrent_requests_share_one_validator(intelligence: YamlIntelligence) -> None:
    code = "theme: cosmo\n"
    requests = [intelligence.get_lint(EditorContext(filetype="yaml", code=code)) for _ in range(5)]
    requests.append(_complete(intelligence, "theme: co", 0, 9))
    results = await asyncio.gather(*requests)

    assert all(result == [] for result in results[:5])
    assert _values(results[5]) == ["cosmo"]
    assert "config" in intelligence.validators
    assert intelligence.validators.get_validator("config", CONFIG_SCHEMA).schema == CONFIG_SCHEMA
