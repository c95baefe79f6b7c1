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

"""Strings that remember where their characters came from.

A ``MappedText`` is built from fragments that are either literal strings or
ranges of a parent text. Offsets into the composed value can always be mapped
back to an offset in the root original text, which is what every source range
produced by the engine refers to.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..utils.source_location import SourceLocation, location_from_index

Piece = Union[str, Tuple[int, int]]

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class Range:
    start: int
    end: int


@dataclass(frozen=True)
class RangedSubstring:
    substring: str
    range: Range


@dataclass(frozen=True)
class _Fragment:
    start: int  # offset in the composed value
    end: int
    parent_start: Optional[int]  # None for literal fragments


class MappedText:
    """Immutable text with an offset -> original-offset mapping."""

    def __init__(self, value: str, parent: Optional["MappedText"] = None,
                 fragments: Sequence[_Fragment] = ()):
        self.value = value
        self._parent = parent
        self._fragments = list(fragments)
        self._starts = [fragment.start for fragment in self._fragments]

    def __repr__(self) -> str:
        return f"MappedText({self.value!r})"

    def __len__(self) -> int:
        return len(self.value)

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def original(self) -> str:
        """The root original text every mapped offset refers to."""
        text = self
        while text._parent is not None:
            text = text._parent
        return text.value

    def _fragment_at(self, index: int) -> Optional[int]:
        if not self._fragments:
            return None
        position = bisect_right(self._starts, index) - 1
        if position < 0:
            return None
        if index >= self._fragments[position].end and position != len(self._fragments) - 1:
            return None
        return position

    def map(self, index: int) -> Optional[int]:
        """Map an offset exactly, or return None when it falls in literal text."""
        if index < 0 or index > len(self.value):
            return None
        if self._parent is None:
            return index
        position = self._fragment_at(index)
        if position is None:
            return None
        fragment = self._fragments[position]
        if fragment.parent_start is None or index > fragment.end:
            return None
        return self._parent.map(fragment.parent_start + index - fragment.start)

    def map_closest(self, index: int) -> int:
        """Map an offset to the root original, snapping literal text to a mapped boundary."""
        index = max(0, min(index, len(self.value)))
        if self._parent is None:
            return index

        position = self._fragment_at(index)
        if position is None:
            position = 0
        fragment = self._fragments[position] if self._fragments else None
        if fragment is not None and fragment.parent_start is not None:
            offset = min(index, fragment.end) - fragment.start
            return self._parent.map_closest(fragment.parent_start + offset)

        # literal text: snap to the end of the previous mapped fragment
        for previous in reversed(self._fragments[:position]):
            if previous.parent_start is not None:
                return self._parent.map_closest(
                    previous.parent_start + previous.end - previous.start)
        for following in self._fragments[position + 1:]:
            if following.parent_start is not None:
                return self._parent.map_closest(following.parent_start)
        return self._parent.map_closest(0)

    def map_location(self, index: int) -> SourceLocation:
        """1-based line/column of an offset, expressed in the root original."""
        return location_from_index(self.original, self.map_closest(index))


def as_mapped_text(text: Union[str, MappedText]) -> MappedText:
    if isinstance(text, MappedText):
        return text
    return MappedText(text)


def mapped_text(source: Union[str, MappedText], pieces: Sequence[Piece]) -> MappedText:
    """Compose a new mapped text from literal strings and ``(start, end)`` ranges of ``source``."""
    parent = as_mapped_text(source)
    chunks: List[str] = []
    fragments: List[_Fragment] = []
    offset = 0
    for piece in pieces:
        if isinstance(piece, str):
            text, parent_start = piece, None
        else:
            start, end = piece
            start = max(0, min(start, len(parent.value)))
            end = max(start, min(end, len(parent.value)))
            text, parent_start = parent.value[start:end], start
        if not text:
            continue
        chunks.append(text)
        fragments.append(_Fragment(offset, offset + len(text), parent_start))
        offset += len(text)
    return MappedText("".join(chunks), parent, fragments)


def lines(text: str) -> List[str]:
    return _LINE_BREAK.split(text)


def ranged_lines(text: str, include_newline: bool = False) -> List[RangedSubstring]:
    """Split into lines, each tagged with its ``[start, end)`` range in ``text``."""
    result: List[RangedSubstring] = []
    start = 0
    for match in _LINE_BREAK.finditer(text):
        end = match.end() if include_newline else match.start()
        result.append(RangedSubstring(text[start:end], Range(start, end)))
        start = match.end()
    result.append(RangedSubstring(text[start:], Range(start, len(text))))
    return result


def mapped_lines(text: MappedText) -> List[MappedText]:
    return [mapped_text(text, [(line.range.start, line.range.end)])
            for line in ranged_lines(text.value)]


def row_col_to_index(text: str, row: int, column: int) -> int:
    line_ranges = ranged_lines(text)
    if row >= len(line_ranges):
        return len(text)
    line = line_ranges[max(row, 0)]
    return min(line.range.start + max(column, 0), line.range.end)


def index_to_row_col(text: str, index: int) -> Tuple[int, int]:
    index = max(0, min(index, len(text)))
    row = text.count("\n", 0, index)
    return row, index - (text.rfind("\n", 0, index) + 1)
