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

"""Structural validation of annotated YAML against a JSON Schema."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from jsonschema.validators import validator_for

from ..parsing.annotated_yaml import AnnotatedNode, node_at_path
from ..text.mapped_text import MappedText
from ..utils.source_location import SourceLocation, location_from_index, yaml_path_pointer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YamlDiagnostic:
    message: str
    start: int  # offsets in the original text
    end: int
    yaml_path: str = ""
    severity: str = "error"
    location: Optional[SourceLocation] = None


class YamlSchemaValidator:
    """A jsonschema validator bound to exactly one schema.

    Construction checks the schema itself, which is the expensive part; callers
    are expected to reuse instances through the validator registry.
    """

    def __init__(self, schema: Dict[str, Any]):
        self.schema = schema
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        self._validator = validator_cls(schema)
        logger.debug(f"Constructed {validator_cls.__name__} for schema {schema.get('$id', '<anonymous>')}")

    def validate_parse(self, code: MappedText, annotation: AnnotatedNode) -> List[YamlDiagnostic]:
        """Validate an annotated tree, returning diagnostics in original-text coordinates."""
        diagnostics: List[YamlDiagnostic] = []
        original = code.original
        errors = sorted(self._validator.iter_errors(annotation.result), key=lambda e: [str(p) for p in e.absolute_path])
        for error in errors:
            path = list(error.absolute_path)
            node = node_at_path(annotation, path)
            yaml_path = yaml_path_pointer(path)
            loc = location_from_index(original, node.start)
            diagnostics.append(YamlDiagnostic(
                message=error.message,
                start=node.start,
                end=node.end,
                yaml_path=yaml_path,
                severity="error",
                location=SourceLocation(yaml_path=yaml_path, line=loc.line, column=loc.column),
            ))
        return diagnostics

