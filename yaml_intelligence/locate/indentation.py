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

"""Guess the cursor path from indentation when the document does not parse."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ..parsing.reparse import Position
from ..text.mapped_text import MappedText, lines as split_lines

logger = logging.getLogger(__name__)


@dataclass
class IndentTree:
    # nearest preceding line with lesser indentation, -1 for the root
    predecessor: List[int]
    indentation: List[int]


def get_indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def yaml_indent_tree(lines: List[str]) -> IndentTree:
    predecessor: List[int] = []
    indents: List[int] = []
    indentation = -1
    prev_predecessor = -1

    for i, line in enumerate(lines):
        line_indent = get_indent(line)
        indents.append(line_indent)

        if not line.strip():
            predecessor.append(predecessor[prev_predecessor] if prev_predecessor >= 0 else -1)
        elif line_indent == indentation:
            predecessor.append(predecessor[prev_predecessor] if prev_predecessor >= 0 else -1)
            prev_predecessor = i
        elif line_indent < indentation:
            v = prev_predecessor
            while v >= 0 and indents[v] >= line_indent:
                v = predecessor[v]
            predecessor.append(v)
            prev_predecessor = i
            indentation = line_indent
        else:
            predecessor.append(prev_predecessor)
            prev_predecessor = i
            indentation = line_indent

    return IndentTree(predecessor=predecessor, indentation=indents)


def locate_from_indentation(
    code: Union[str, MappedText],
    position: Position,
    line: Optional[str] = None,
) -> Optional[List[Union[str, int]]]:
    """Walk from the cursor line to the root through less-indented lines.

    ``line`` is the cursor line up to the cursor; it defaults to the text of
    the cursor row. Returns None when a line on the walk is neither blank, a
    sequence item, nor a ``key:`` line.
    """
    if isinstance(code, MappedText):
        code = code.value
    lines = split_lines(code)
    if position.row < 0 or position.row >= len(lines):
        return None
    if line is None:
        line = lines[position.row][:position.column]

    tree = yaml_indent_tree(lines)
    path: List[Union[str, int]] = []
    line_indent = get_indent(line)
    line_no = position.row

    while line_no != -1:
        trimmed = lines[line_no].strip()
        if not trimmed:
            prev = line_no
            while prev >= 0 and not lines[prev].strip():
                prev -= 1
            if prev == -1:
                break
            if get_indent(lines[prev]) < line_indent:
                line_no = prev
                continue

        if line_indent >= tree.indentation[line_no]:
            if trimmed.startswith("-"):
                path.append(0)
            elif trimmed.endswith(":"):
                path.append(trimmed[:-1])
            elif trimmed:
                logger.debug(f"Indentation locate gave up at line {line_no}: {trimmed!r}")
                return None
        line_no = tree.predecessor[line_no]

    path.reverse()
    return path
