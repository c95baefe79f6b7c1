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

"""Error-tolerant reparsing around the cursor line.

While a user is typing, the line under the cursor is usually an incomplete
token. Instead of a general recovery parse we truncate that line one character
at a time and keep the truncations that parse cleanly.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Union

from ..text.mapped_text import MappedText, as_mapped_text, mapped_text, ranged_lines
from .tree_sitter_yaml import ConcreteTree, YamlParser, get_yaml_parser

logger = logging.getLogger(__name__)


class Position(NamedTuple):
    row: int
    column: int


@dataclass(frozen=True)
class ParseCandidate:
    tree: ConcreteTree
    code: MappedText
    deletions: int

    @property
    def is_complete(self) -> bool:
        """True when the tree spans every non-whitespace character of the candidate."""
        covered = self.tree.end(self.tree.root)
        return covered >= len(self.code.value.rstrip())


def attempt_parses_at_line(
    code: Union[str, MappedText],
    position: Position,
    parser: Optional[YamlParser] = None,
) -> Iterator[ParseCandidate]:
    """Yield clean parses of ``code``, least destructive first.

    The untouched text comes first; if it parses cleanly nothing else is tried.
    Otherwise the cursor line is cut back from the cursor column towards column
    0 and every clean reparse is yielded together with the number of deleted
    characters. Other lines are never modified.
    """
    code = as_mapped_text(code)
    parser = parser or get_yaml_parser()

    tree = parser.parse(code.value)
    if not tree.has_error:
        yield ParseCandidate(tree, code, 0)
        return

    code_lines = ranged_lines(code.value)
    if position.row < 0 or position.row >= len(code_lines):
        return

    current = code_lines[position.row].range
    column = min(position.column, current.end - current.start)
    deletions = position.column - column
    while column > 0:
        column -= 1
        deletions += 1
        pieces = []
        if position.row > 0:
            pieces.append((0, code_lines[position.row - 1].range.end))
            pieces.append("\n")
        pieces.append((current.start, current.start + column))
        if position.row + 1 < len(code_lines):
            pieces.append("\n")
            pieces.append((code_lines[position.row + 1].range.start, code_lines[-1].range.end))
        candidate = mapped_text(code, pieces)
        tree = parser.parse(candidate.value)
        if tree.has_error:
            continue
        logger.debug(f"Clean reparse after deleting {deletions} character(s) on line {position.row}")
        yield ParseCandidate(tree, candidate, deletions)
