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

"""Document cells and YAML option blocks written as comments inside code cells.

A python cell such as::

    #| echo: false
    #| fig-cap: "A plot"
    plot(x)

carries the YAML ``echo: false\\nfig-cap: "A plot"`` behind the ``#| `` prefix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ..text.mapped_text import MappedText, RangedSubstring, lines, mapped_text, ranged_lines

RAW = "raw"
MARKDOWN = "markdown"
MATH = "math"
CODE = "code"


@dataclass(frozen=True)
class Cell:
    """One pre-segmented region of a composite document.

    ``raw`` cells hold front matter including its ``---`` fences; ``code``
    cells hold the source between the fence lines and name their language.
    """

    cell_type: str
    source: MappedText
    language: Optional[str] = None

    @property
    def has_delimiters(self) -> bool:
        # raw and markdown cells are stored with their surrounding lines
        return self.cell_type not in (RAW, MARKDOWN)

    @property
    def line_count(self) -> int:
        size = len(lines(self.source.value))
        return size + 2 if self.has_delimiters else size


LANG_COMMENT_CHARS: Dict[str, Union[str, Tuple[str, str]]] = {
    "r": "#",
    "python": "#",
    "julia": "#",
    "scala": "//",
    "matlab": "%",
    "csharp": "//",
    "fsharp": "//",
    "c": ("/*", "*/"),
    "css": ("/*", "*/"),
    "sas": ("*", ";"),
    "powershell": "#",
    "bash": "#",
    "sql": "--",
    "mysql": "--",
    "psql": "--",
    "lua": "--",
    "cpp": "//",
    "cc": "//",
    "stan": "#",
    "octave": "#",
    "fortran": "!",
    "fortran95": "!",
    "awk": "#",
    "gawk": "#",
    "stata": "*",
    "java": "//",
    "groovy": "//",
    "sed": "#",
    "perl": "#",
    "ruby": "#",
    "tikz": "%",
    "js": "//",
    "d3": "//",
    "node": "//",
    "sass": "//",
    "coffee": "#",
    "go": "//",
    "asy": "//",
    "haskell": "--",
    "dot": "//",
    "ojs": "//",
}


def lang_comment_chars(language: str) -> Tuple[str, str]:
    """Return ``(prefix, suffix)`` comment characters, ``#`` by default."""
    chars = LANG_COMMENT_CHARS.get(language, "#")
    if isinstance(chars, str):
        return chars, ""
    return chars[0], chars[1]


def option_comment_prefix(comment: str) -> str:
    return comment + "| "


def option_comment_prefix_for_language(language: str) -> str:
    return option_comment_prefix(lang_comment_chars(language)[0])


_KNITR_LINE = re.compile(r"^[^:\s=]+\s*=")


def guess_chunk_options_format(options: str) -> str:
    """Return ``"knitr"`` for ``key=value`` style option lines, ``"yaml"`` otherwise."""
    option_lines = [line for line in lines(options) if line.strip()]
    if not option_lines:
        return "yaml"
    if any(":" in line for line in option_lines):
        return "yaml"
    if any(_KNITR_LINE.match(line.strip()) for line in option_lines):
        return "knitr"
    return "yaml"


@dataclass
class PartitionedCell:
    yaml: Optional[MappedText]  # comment markers stripped
    options_source: List[RangedSubstring]  # option lines including comment markers
    source: MappedText  # executable code after the options
    source_start_line: int


def partition_cell_options(language: str, source: MappedText) -> PartitionedCell:
    """Split a code cell into its YAML option block and the remaining code."""
    prefix_chars, suffix = lang_comment_chars(language)
    prefix = option_comment_prefix(prefix_chars)

    options_source: List[RangedSubstring] = []
    yaml_ranges: List[Tuple[int, int]] = []
    end_of_yaml = 0
    for line in ranged_lines(source.value, include_newline=True):
        content = line.substring.rstrip("\r\n")
        if not content.startswith(prefix):
            break
        if suffix and not content.rstrip().endswith(suffix):
            break
        option = content[len(prefix):]
        if suffix:
            option = option.rstrip()[:-len(suffix)]
        start = line.range.start + len(prefix)
        yaml_ranges.append((start, start + len(option)))
        options_source.append(line)
        end_of_yaml = line.range.end

    yaml = None
    if yaml_ranges:
        pieces: List[Union[str, Tuple[int, int]]] = []
        for i, piece in enumerate(yaml_ranges):
            if i:
                pieces.append("\n")
            pieces.append(piece)
        candidate = mapped_text(source, pieces)
        if guess_chunk_options_format(candidate.value) == "yaml":
            yaml = candidate

    return PartitionedCell(
        yaml=yaml,
        options_source=options_source,
        source=mapped_text(source, [(end_of_yaml, len(source.value))]),
        source_start_line=len(yaml_ranges),
    )


def code_cell_language(first_line: str) -> Optional[str]:
    """Read the language from an opening fence such as ```` ```{python} ````."""
    match = re.match(r".*\{([a-z]+)\}", first_line)
    return match.group(1) if match else None

