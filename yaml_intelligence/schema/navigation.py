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

"""Resolve a key/index path against a JSON-Schema-like definition."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..exceptions import UnsupportedSchemaError

logger = logging.getLogger(__name__)

Schema = Dict[str, Any]

COMBINATORS = ("anyOf", "oneOf", "allOf")


def schema_type(schema: Any) -> str:
    """Return the discriminant used to navigate and complete ``schema``."""
    if not isinstance(schema, Mapping):
        return "any"
    for combinator in COMBINATORS:
        if combinator in schema:
            return combinator
    if "enum" in schema:
        return "enum"
    declared = schema.get("type")
    if isinstance(declared, str):
        return declared
    if isinstance(declared, (list, tuple)):
        concrete = [t for t in declared if t != "null"]
        if concrete:
            return concrete[0]
    if "properties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "any"


def collect_schema_ids(schema: Any, refs: Optional[Dict[str, Schema]] = None) -> Dict[str, Schema]:
    """Collect every ``$id``-tagged subschema reachable from ``schema``."""
    refs = {} if refs is None else refs
    if isinstance(schema, Mapping):
        schema_id = schema.get("$id")
        if isinstance(schema_id, str) and schema_id not in refs:
            refs[schema_id] = schema
        for value in schema.values():
            collect_schema_ids(value, refs)
    elif isinstance(schema, list):
        for value in schema:
            collect_schema_ids(value, refs)
    return refs


def resolve_ref(schema: Any, refs: Mapping[str, Schema]) -> Optional[Any]:
    """Follow ``$ref`` links; None when a link points at an unknown identity."""
    seen = set()
    while isinstance(schema, Mapping) and "$ref" in schema:
        ref = schema["$ref"]
        if ref in seen or ref not in refs:
            return None
        seen.add(ref)
        schema = refs[ref]
    return schema


def navigate_schema(
    schema: Schema,
    path: Sequence[Union[str, int]],
    definitions: Optional[Mapping[str, Schema]] = None,
) -> List[Schema]:
    """Return the subschemas reachable by following ``path`` from ``schema``.

    ``definitions`` seeds the identity table used for ``$ref``; identities met
    along the way are added as they are visited.

    Raises:
        UnsupportedSchemaError: If an ``allOf`` schema sits on the path.
    """
    refs: Dict[str, Schema] = dict(definitions or {})

    def inner(sub_schema: Any, index: int) -> List[Schema]:
        if isinstance(sub_schema, Mapping) and isinstance(sub_schema.get("$id"), str):
            refs.setdefault(sub_schema["$id"], sub_schema)
        if isinstance(sub_schema, Mapping) and "$ref" in sub_schema:
            resolved = resolve_ref(sub_schema, refs)
            if resolved is None:
                logger.debug(f"Unresolved schema reference {sub_schema['$ref']!r}")
                return []
            sub_schema = resolved
            if isinstance(sub_schema.get("$id"), str):
                refs.setdefault(sub_schema["$id"], sub_schema)

        if index == len(path):
            return [sub_schema]

        st = schema_type(sub_schema)
        if st == "object":
            key = path[index]
            properties = sub_schema.get("properties") or {}
            if isinstance(key, str) and key in properties:
                return inner(properties[key], index + 1)
            if index != len(path) - 1 or not isinstance(key, str):
                return []
            if any(name.startswith(key) for name in properties):
                return [sub_schema]
            return []
        if st == "array":
            items = sub_schema.get("items")
            if not isinstance(items, Mapping):
                return []
            return inner(items, index + 1)
        if st == "anyOf":
            result: List[Schema] = []
            for branch in sub_schema["anyOf"]:
                result.extend(inner(branch, index))
            return result
        if st == "oneOf":
            matches = [found for found in (inner(branch, index) for branch in sub_schema["oneOf"]) if found]
            if len(matches) != 1:
                return []
            return matches[0]
        if st == "allOf":
            raise UnsupportedSchemaError("Internal error: don't know how to navigate allOf schema")
        return []

    return inner(schema, 0)
