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

"""Turn matching schemas into filtered, sorted completion lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..schema.completions import KEY, CompletionItem, SchemaCompletions, schema_completions
from ..schema.navigation import navigate_schema, resolve_ref, schema_type


class NoResult(Enum):
    """Soft outcomes that are not completion lists."""

    # nothing was tried: fence line, unsupported cell, missing schema, no clean parse
    NOT_ATTEMPTED = "not-attempted"
    # a valid position where no candidate matches the word being typed
    NO_COMPLETIONS = "no-completions"


@dataclass
class CompletionResult:
    token: str
    completions: List[CompletionItem] = field(default_factory=list)
    cacheable: bool = True

    def only(self, completion_type: str) -> Union["CompletionResult", NoResult]:
        kept = [c for c in self.completions if c.type == completion_type]
        if not kept:
            return NoResult.NO_COMPLETIONS
        return CompletionResult(self.token, kept, self.cacheable)


def _continue_on_accept(item: CompletionItem, indent: int, comment_prefix: str,
                        definitions: Mapping[str, Any]) -> CompletionItem:
    if not item.suggest_on_accept or item.type != KEY or schema_type(item.schema) != "object":
        return item
    key = item.value.split(":")[0]
    sub_schema = resolve_ref((item.schema.get("properties") or {}).get(key), definitions)
    continuation = "\n" + comment_prefix + " " * (indent + 2)
    st = schema_type(sub_schema)
    if st == "object":
        return item.with_value(item.value.rstrip() + continuation)
    if st == "array":
        return item.with_value(item.value.rstrip() + continuation + "- ")
    return item


def completions(
    schema: Any,
    path: Sequence[Union[str, int]],
    word: str,
    indent: int = 0,
    comment_prefix: str = "",
    candidates: SchemaCompletions = schema_completions,
    definitions: Optional[Mapping[str, Any]] = None,
) -> Union[CompletionResult, NoResult]:
    """Candidates for the schemas reachable along ``path`` that start with ``word``.

    Accepting a key whose value is an object (or array) inserts a newline and
    the child indentation, so the user can type the child key right away.
    """
    definitions = definitions or {}
    items: List[CompletionItem] = []
    for matching in navigate_schema(schema, path, definitions):
        for item in candidates(matching):
            items.append(_continue_on_accept(item, indent, comment_prefix, definitions))

    items = [item for item in items if item.value.startswith(word)]
    if not items:
        return NoResult.NO_COMPLETIONS
    items.sort(key=lambda item: item.value)
    return CompletionResult(token=word, completions=items)
