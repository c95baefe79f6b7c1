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

"""Position-aware YAML intelligence.

Completions and diagnostics for YAML documents that are being edited, driven
by JSON-Schema-like schemas:

    registry = SchemaRegistry.load("schemas.yml")
    engine = YamlIntelligence(registry)
    result = await engine.get_completions(
        EditorContext(filetype="yaml", code=text, position=Position(3, 4)))
"""

from .automation import CompletionResult, EditorContext, NoResult, YamlIntelligence
from .config import IntelligenceConfig
from .exceptions import YamlIntelligenceError
from .parsing.reparse import Position
from .schema.registry import SchemaRegistry
from .validation.validator import YamlDiagnostic

__version__ = "0.1.0"

__all__ = [
    "CompletionResult",
    "EditorContext",
    "NoResult",
    "YamlIntelligence",
    "IntelligenceConfig",
    "YamlIntelligenceError",
    "Position",
    "SchemaRegistry",
    "YamlDiagnostic",
]
