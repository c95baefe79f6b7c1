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

"""Raw completion candidates offered by a single schema node."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from .navigation import resolve_ref, schema_type

KEY = "key"
VALUE = "value"


@dataclass(frozen=True)
class CompletionItem:
    value: str
    type: str  # "key" or "value"
    schema: Any
    suggest_on_accept: bool = False
    description: Optional[str] = None

    def with_value(self, value: str) -> "CompletionItem":
        return replace(self, value=value)


SchemaCompletions = Callable[[Any], List[CompletionItem]]


def _describe(schema: Any) -> Optional[str]:
    if isinstance(schema, Mapping):
        description = schema.get("description")
        if isinstance(description, str):
            return description
    return None


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def make_schema_completions(definitions: Optional[Mapping[str, Any]] = None) -> SchemaCompletions:
    """Build the default candidate function, resolving ``$ref`` through ``definitions``."""
    refs: Dict[str, Any] = dict(definitions or {})

    def completions(schema: Any, _depth: int = 0) -> List[CompletionItem]:
        schema = resolve_ref(schema, refs)
        if not isinstance(schema, Mapping) or _depth > 8:
            return []

        explicit = schema.get("completions")
        if isinstance(explicit, list):
            return [CompletionItem(_literal(v), VALUE, schema, description=_describe(schema)) for v in explicit]

        st = schema_type(schema)
        if st == "object":
            return [
                CompletionItem(f"{name}: ", KEY, schema, suggest_on_accept=True,
                               description=_describe(resolve_ref(sub, refs)))
                for name, sub in (schema.get("properties") or {}).items()
            ]
        if st == "enum":
            return [CompletionItem(_literal(v), VALUE, schema, description=_describe(schema))
                    for v in schema["enum"]]
        if st == "boolean":
            return [CompletionItem(v, VALUE, schema) for v in ("true", "false")]
        if st in ("anyOf", "oneOf"):
            result: List[CompletionItem] = []
            for branch in schema[st]:
                result.extend(completions(branch, _depth + 1))
            return result
        return []

    return completions


schema_completions = make_schema_completions()
