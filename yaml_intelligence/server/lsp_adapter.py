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

"""Conversions between engine results and Language Server Protocol types."""

from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlparse

from lsprotocol import types as lsp

from ..automation.completion import CompletionResult, NoResult
from ..schema.completions import KEY
from ..text.mapped_text import index_to_row_col
from ..validation.validator import YamlDiagnostic

SCRIPT_LANGUAGES = {
    '.py': 'python',
    '.r': 'r',
    '.jl': 'julia',
    '.sql': 'sql',
    '.lua': 'lua',
    '.js': 'js',
}

_SEVERITY = {
    'error': lsp.DiagnosticSeverity.Error,
    'warning': lsp.DiagnosticSeverity.Warning,
}


def uri_to_path(uri: str) -> str:
    """Convert URI to file path."""
    parsed = urlparse(uri)
    return unquote(parsed.path)


def document_kind(path: str) -> Optional[Tuple[str, Optional[str]]]:
    """Return ``(filetype, language)`` for a served document, None when not served."""
    suffix = Path(path).suffix.lower()
    if suffix in ('.yaml', '.yml'):
        return 'yaml', None
    if suffix in SCRIPT_LANGUAGES:
        return 'script', SCRIPT_LANGUAGES[suffix]
    return None


def to_lsp_range(text: str, start: int, end: int) -> lsp.Range:
    start_row, start_col = index_to_row_col(text, start)
    end_row, end_col = index_to_row_col(text, end)
    return lsp.Range(
        start=lsp.Position(line=start_row, character=start_col),
        end=lsp.Position(line=end_row, character=end_col),
    )


def to_lsp_diagnostic(diagnostic: YamlDiagnostic, text: str) -> lsp.Diagnostic:
    """Convert a diagnostic whose offsets index into ``text``."""
    return lsp.Diagnostic(
        range=to_lsp_range(text, diagnostic.start, diagnostic.end),
        message=diagnostic.message,
        severity=_SEVERITY.get(diagnostic.severity, lsp.DiagnosticSeverity.Error),
        source='yaml-intelligence',
        code=diagnostic.yaml_path or None,
    )


def to_lsp_diagnostics(diagnostics: List[YamlDiagnostic], text: str) -> List[lsp.Diagnostic]:
    return [to_lsp_diagnostic(diagnostic, text) for diagnostic in diagnostics]


def to_lsp_completion_list(result) -> lsp.CompletionList:
    """Convert a completion result; soft non-results become an empty list."""
    if isinstance(result, NoResult) or not isinstance(result, CompletionResult):
        return lsp.CompletionList(is_incomplete=False, items=[])

    items = []
    for item in result.completions:
        is_key = item.type == KEY
        items.append(lsp.CompletionItem(
            label=item.value.split(':')[0] if is_key else item.value,
            kind=lsp.CompletionItemKind.Property if is_key else lsp.CompletionItemKind.Value,
            insert_text=item.value,
            documentation=item.description,
        ))
    return lsp.CompletionList(is_incomplete=not result.cacheable, items=items)
