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

"""Registry of already-parsed schemas.

The registry document has the shape::

    schemas:
      config: {...}
      front-matter: {...}
    languages:
      python:
        schema: {...}
    definitions:        # optional, extra $id-tagged schemas
      - {...}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..exceptions import SchemaLoadError, SchemaNotFoundError
from .navigation import collect_schema_ids

logger = logging.getLogger(__name__)

# Registry cache to avoid reloading files
_REGISTRY_CACHE: Dict[Path, "SchemaRegistry"] = {}


class SchemaRegistry:
    """Named schemas, per-language cell option schemas and shared definitions."""

    def __init__(
        self,
        schemas: Optional[Dict[str, Any]] = None,
        languages: Optional[Dict[str, Any]] = None,
        definitions: Optional[List[Any]] = None,
    ):
        self.schemas: Dict[str, Any] = dict(schemas or {})
        self.languages: Dict[str, Any] = dict(languages or {})
        self.definitions: Dict[str, Any] = {}
        for schema in list(self.schemas.values()) + [
            entry.get("schema") for entry in self.languages.values() if isinstance(entry, dict)
        ] + list(definitions or []):
            collect_schema_ids(schema, self.definitions)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SchemaRegistry":
        if not isinstance(document, dict):
            raise SchemaLoadError("Schema registry document must be a mapping")
        return cls(
            schemas=document.get("schemas"),
            languages=document.get("languages"),
            definitions=document.get("definitions"),
        )

    @classmethod
    def load(cls, file_path: Union[str, Path]) -> "SchemaRegistry":
        """Load a registry from a JSON or YAML file.

        Raises:
            SchemaLoadError: If the file is missing or cannot be parsed.
        """
        path = Path(file_path)
        if path in _REGISTRY_CACHE:
            return _REGISTRY_CACHE[path]

        if not path.is_file():
            raise SchemaLoadError(f"Schema registry file not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
            if path.suffix == ".json":
                document = json.loads(content)
            else:
                document = yaml.safe_load(content)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise SchemaLoadError(f"Failed to read schema registry {path}: {exc}") from exc

        registry = cls.from_document(document)
        logger.debug(f"Loaded schema registry from {path}: {sorted(registry.schemas)}")
        _REGISTRY_CACHE[path] = registry
        return registry

    def has(self, name: str) -> bool:
        return name in self.schemas

    def get(self, name: str) -> Any:
        if name not in self.schemas:
            raise SchemaNotFoundError(f"Schema '{name}' not found. Available: {sorted(self.schemas)}")
        return self.schemas[name]

    def language_schema(self, language: str) -> Optional[Any]:
        entry = self.languages.get(language)
        if isinstance(entry, dict):
            return entry.get("schema")
        return None


def clear_cache() -> None:
    """Clear the registry cache. Useful for testing."""
    _REGISTRY_CACHE.clear()
