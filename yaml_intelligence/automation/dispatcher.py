# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Route completion and validation requests to the right YAML region.

A request arrives as an :class:`EditorContext` describing a whole document.
Standalone YAML files are handled directly, front-matter and code cells of
composite documents are narrowed to their YAML first, and everything else is
answered with :data:`NoResult.NOT_ATTEMPTED` (or no diagnostics).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from ..config import IntelligenceConfig
from ..exceptions import UnsupportedCellKindError
from ..locate.cursor import locate_cursor
from ..locate.indentation import locate_from_indentation
from ..parsing.annotated_yaml import build_annotated
from ..parsing.reparse import Position, attempt_parses_at_line
from ..parsing.tree_sitter_yaml import YamlParser
from ..schema.completions import KEY, VALUE, SchemaCompletions, make_schema_completions
from ..schema.registry import SchemaRegistry
from ..text.mapped_text import MappedText, as_mapped_text, lines, mapped_text, ranged_lines, row_col_to_index
from ..validation.validator import YamlDiagnostic
from ..validation.validator_registry import ValidatorRegistry
from .cells import CODE, MARKDOWN, MATH, RAW, Cell, code_cell_language, option_comment_prefix_for_language, \
    partition_cell_options
from .completion import CompletionResult, NoResult, completions

logger = logging.getLogger(__name__)

YAML = "yaml"
MARKDOWN_FILE = "markdown"
SCRIPT = "script"

COMPLETIONS = "completions"
VALIDATION = "validation"

Completions = Union[CompletionResult, NoResult]


@dataclass
class EditorContext:
    """A request from an editor: the document, the cursor and how to read it."""
    filetype: str  # "yaml", "markdown" or "script"
    code: Union[str, MappedText]
    position: Optional[Position] = None
    path: str = ""
    line: Optional[str] = None  # cursor line up to the cursor
    cells: Optional[Sequence[Cell]] = None
    language: Optional[str] = None
    schema_name: Optional[str] = None


@dataclass
class _YamlRequest:
    code: MappedText
    position: Position
    line: str
    schema_name: str
    schema: Any
    comment_prefix: str = ""


def _line_before_cursor(code: str, position: Position) -> str:
    code_lines = lines(code)
    if position.row < 0 or position.row >= len(code_lines):
        return ""
    return code_lines[position.row][:position.column]


def _end_position(code: str) -> Position:
    code_lines = lines(code)
    return Position(len(code_lines) - 1, len(code_lines[-1]))


def _word(line: str) -> str:
    if line.endswith("-") or line.endswith(":"):
        return ""
    return line.split(" ")[-1]


def _only(result: Completions, completion_type: str) -> Completions:
    if isinstance(result, NoResult):
        return result
    return result.only(completion_type)


class YamlIntelligence:
    """Schema-driven completions and diagnostics for YAML inside editor documents."""

    def __init__(
        self,
        schemas: SchemaRegistry,
        validators: Optional[ValidatorRegistry] = None,
        parser: Optional[YamlParser] = None,
        candidates: Optional[SchemaCompletions] = None,
        config: Optional[IntelligenceConfig] = None,
    ):
        self.schemas = schemas
        self.validators = validators or ValidatorRegistry()
        self.parser = parser
        self.candidates = candidates or make_schema_completions(schemas.definitions)
        self.config = config or IntelligenceConfig()

    async def get_completions(self, context: EditorContext) -> Completions:
        result = await self._dispatch(COMPLETIONS, context)
        return NoResult.NOT_ATTEMPTED if result is None else result

    async def get_lint(self, context: EditorContext) -> List[YamlDiagnostic]:
        result = await self._dispatch(VALIDATION, context)
        return result or []

    # dispatch

    async def _dispatch(self, kind: str, context: EditorContext):
        code = as_mapped_text(context.code)
        position = context.position
        if position is None:
            position = _end_position(code.value)
        line = context.line
        if line is None:
            line = _line_before_cursor(code.value, position)

        if context.filetype == YAML:
            schema_name = context.schema_name or self.config.schema_for_path(context.path)
            request = self._request(code, position, line, schema_name)
            if request is None:
                return None
            return await self._from_yaml(kind, request)
        if context.filetype == MARKDOWN_FILE:
            return await self._from_markdown(kind, context.cells or [], position, line)
        if context.filetype == SCRIPT:
            return await self._from_script(kind, code, position, line, context.language)

        logger.debug(f"No automation for filetype '{context.filetype}'")
        return None

    def _request(self, code: MappedText, position: Position, line: str, schema_name: str,
                 schema: Any = None, comment_prefix: str = "") -> Optional[_YamlRequest]:
        if schema is None:
            if not self.schemas.has(schema_name):
                logger.warning(f"Schema '{schema_name}' is not registered; skipping request")
                return None
            schema = self.schemas.get(schema_name)
        return _YamlRequest(code, position, line, schema_name, schema, comment_prefix)

    async def _from_yaml(self, kind: str, request: _YamlRequest):
        code_lines = ranged_lines(request.code.value)
        first = code_lines[0]
        leading = first.substring.strip() == "---"
        trailing = None
        for index in range(len(code_lines) - 1, 0, -1):
            if code_lines[index].substring.strip():
                if code_lines[index].substring.strip() == "---":
                    trailing = index
                break

        if kind == COMPLETIONS and leading and request.position.row == 0:
            return NoResult.NOT_ATTEMPTED
        if kind == COMPLETIONS and trailing is not None and request.position.row == trailing:
            return NoResult.NOT_ATTEMPTED

        if leading or trailing is not None:
            # keep the fence newlines so rows do not move
            start = first.range.end if leading else 0
            if trailing is None:
                pieces = [(start, len(request.code.value))]
            else:
                fence = code_lines[trailing].range
                pieces = [(start, fence.start), (fence.end, len(request.code.value))]
            request.code = mapped_text(request.code, pieces)

        if kind == COMPLETIONS:
            return await self._complete_yaml(request)
        return await self._validate_yaml(request)

    async def _from_markdown(self, kind: str, cells: Sequence[Cell], position: Position, line: str):
        if kind == VALIDATION:
            diagnostics: List[YamlDiagnostic] = []
            for cell in cells:
                cell_position = _end_position(cell.source.value)
                diagnostics.extend(await self._from_cell(kind, cell, cell_position, "") or [])
            return diagnostics

        lines_so_far = 0
        for cell in cells:
            size = cell.line_count
            if lines_so_far + size > position.row:
                if cell.has_delimiters:
                    row = position.row - (lines_so_far + 1)
                else:
                    row = position.row - lines_so_far
                return await self._from_cell(kind, cell, Position(row, position.column), line)
            lines_so_far += size
        return NoResult.NOT_ATTEMPTED

    async def _from_cell(self, kind: str, cell: Cell, position: Position, line: str):
        if cell.cell_type == RAW:
            request = self._request(cell.source, position, line, self.config.front_matter_schema)
            if request is None:
                return None
            return await self._from_yaml(kind, request)
        if cell.cell_type == CODE:
            if cell.language is None:
                return None
            return await self._from_script(kind, cell.source, position, line, cell.language)
        if cell.cell_type in (MARKDOWN, MATH):
            return NoResult.NOT_ATTEMPTED if kind == COMPLETIONS else []
        raise UnsupportedCellKindError(f"Unsupported cell kind: {cell.cell_type}")

    async def _from_script(self, kind: str, code: MappedText, position: Position, line: str,
                           language: Optional[str]):
        if language is None:
            language = code_cell_language(lines(code.value)[0])
            if language is None:
                return None
            # drop the fence line, keeping rows aligned with the cell body
            fence_end = ranged_lines(code.value, include_newline=True)[0].range.end
            code = mapped_text(code, [(fence_end, len(code.value))])
            position = Position(position.row - 1, position.column)

        schema = self.schemas.language_schema(language)
        if schema is None:
            logger.debug(f"No cell option schema for language '{language}'")
            return None

        partitioned = partition_cell_options(language, code)
        if partitioned.yaml is None:
            return None
        prefix = option_comment_prefix_for_language(language)

        if kind == COMPLETIONS:
            if position.row < 0 or position.row >= partitioned.source_start_line:
                return NoResult.NOT_ATTEMPTED
            if not line.startswith(prefix):
                return NoResult.NOT_ATTEMPTED
            position = Position(position.row, max(position.column - len(prefix), 0))
            line = line[len(prefix):]
        else:
            position = _end_position(partitioned.yaml.value)

        request = self._request(partitioned.yaml, position, line, f"{language}-cell-options",
                                schema=schema, comment_prefix=prefix)
        return await self._from_yaml(kind, request)

    # yaml

    def _completions(self, request: _YamlRequest, path, word: str, indent: int) -> Completions:
        return completions(
            request.schema,
            path,
            word,
            indent=indent,
            comment_prefix=request.comment_prefix,
            candidates=self.candidates,
            definitions=self.schemas.definitions,
        )

    async def _complete_yaml(self, request: _YamlRequest) -> Completions:
        async with self.validators.slot(request.schema_name):
            return self._complete_in_slot(request)

    def _complete_in_slot(self, request: _YamlRequest) -> Completions:
        line = request.line
        position = request.position
        word = _word(line)

        if not line.strip():
            path = locate_from_indentation(request.code, position, line)
            if path is None:
                return NoResult.NOT_ATTEMPTED
            return _only(self._completions(request, path, word, len(line)), KEY)

        indent = len(line) - len(line.lstrip())
        in_value = ":" in line
        for candidate in attempt_parses_at_line(request.code, position, self.parser):
            remaining = line[:max(len(line) - candidate.deletions, 0)]
            cursor = Position(position.row, max(position.column - candidate.deletions, 0))

            if not remaining.strip():
                path = locate_from_indentation(candidate.code, cursor, remaining)
                if path is None:
                    return NoResult.NOT_ATTEMPTED
                return _only(self._completions(request, path, word, indent), KEY)

            if not candidate.is_complete:
                continue

            annotation = build_annotated(candidate.tree, candidate.code)
            index = candidate.code.map_closest(row_col_to_index(candidate.code.value, cursor.row, cursor.column))
            location = locate_cursor(annotation, index)
            path = location.path
            if location.with_error and in_value:
                key = line.strip().split(":")[0]
                fallback = locate_from_indentation(candidate.code, cursor, remaining)
                if fallback and fallback[-1] == key:
                    path = fallback
                else:
                    path = path + [key]
            if in_value and word and path and str(path[-1]) == word:
                path = path[:-1]

            logger.debug(f"Completing {word!r} at path {path}")
            result = self._completions(request, path, word, indent)
            return _only(result, VALUE) if in_value else result

        return NoResult.NOT_ATTEMPTED

    async def _validate_yaml(self, request: _YamlRequest) -> List[YamlDiagnostic]:
        if not request.code.value.strip():
            return []
        async with self.validators.checkout(request.schema_name, request.schema) as validator:
            for candidate in attempt_parses_at_line(request.code, request.position, self.parser):
                if not candidate.is_complete:
                    continue
                annotation = build_annotated(candidate.tree, candidate.code)
                return validator.validate_parse(candidate.code, annotation)
        logger.debug(f"No clean parse to validate against '{request.schema_name}'")
        return []
