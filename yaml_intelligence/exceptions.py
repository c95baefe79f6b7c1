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

"""Custom exceptions for the YAML intelligence engine.

Everything raised from here signals a contract mismatch between the engine and
its upstream grammar, schema or cell segmentation. User-data problems are never
raised; they surface as "no result" sentinels instead.
"""


class YamlIntelligenceError(Exception):
    """Base exception for YAML intelligence errors."""
    pass


class UnsupportedNodeKindError(YamlIntelligenceError):
    """Exception raised when the syntax tree contains a node kind without a build rule."""

    def __init__(self, kind: str, context: str = ""):
        self.kind = kind
        message = f"Internal error: don't know how to build node of type {kind}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class UnsupportedSchemaError(YamlIntelligenceError):
    """Exception raised when schema navigation reaches a combinator it cannot follow."""
    pass


class UnsupportedCellKindError(YamlIntelligenceError):
    """Exception raised when a document cell of unknown kind reaches the dispatcher."""
    pass


class SchemaNotFoundError(YamlIntelligenceError):
    """Exception raised when a named schema is not present in the registry."""
    pass


class SchemaLoadError(YamlIntelligenceError):
    """Exception raised when a schema registry file cannot be read or parsed."""
    pass
