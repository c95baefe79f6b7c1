from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    yaml_path: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def json_pointer_escape(token: str) -> str:
    # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
    return token.replace("~", "~0").replace("/", "~1")


def yaml_path_pointer(path: Sequence[Union[str, int]]) -> str:
    """Render a key/index path as a JSON-pointer-like YAML path ("" for the root)."""
    return "".join(f"/{json_pointer_escape(str(segment))}" for segment in path)


def location_from_index(text: str, index: int) -> SourceLocation:
    """Return the 1-based line/column of a string index."""
    index = max(0, min(index, len(text)))
    line_start = text.rfind("\n", 0, index) + 1
    return SourceLocation(
        line=text.count("\n", 0, index) + 1,
        column=index - line_start + 1,
    )
