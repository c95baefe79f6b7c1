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

"""Locate the key/index path of a cursor inside an annotated YAML tree."""

from dataclasses import dataclass, field
from typing import List, Union

from ..parsing.annotated_yaml import AnnotatedNode

PathSegment = Union[str, int]


@dataclass
class CursorLocation:
    path: List[PathSegment] = field(default_factory=list)
    # True when the cursor sits inside a mapping but outside all of its pairs
    with_error: bool = False


def locate_cursor(annotation: AnnotatedNode, position: int) -> CursorLocation:
    """Return the root-to-leaf path of the node under ``position``.

    ``position`` is an offset in the same coordinates as the annotation ranges.
    """
    location = CursorLocation()

    def locate(node: AnnotatedNode, path: List[PathSegment]) -> List[PathSegment]:
        if node.is_mapping:
            for key, value in node.pairs():
                if key.start <= position <= key.end:
                    return path + [key.result]
                if value.start <= position <= value.end:
                    return locate(value, path + [key.result])
            location.with_error = True
            return path

        if node.is_sequence:
            for index, item in enumerate(node.components):
                if item.start <= position <= item.end:
                    return locate(item, path + [index])
                if item.start > position:
                    return path if index == 0 else path + [index - 1]
            if node.components:
                return path + [len(node.components) - 1]
            return path

        if node.is_empty:
            return path
        return path + [node.result]

    location.path = locate(annotation, [])
    return location
