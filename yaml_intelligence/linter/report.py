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

"""Error reporting for the linter."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ..validation.validator import YamlDiagnostic


class LintResult:
    """Container for linting results for a single file."""

    def __init__(self, file_path: Path):
        """Initialize lint result.

        Args:
            file_path: Path to the file being linted
        """
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    @staticmethod
    def _entry(message: str, line: Optional[int], column: Optional[int],
               yaml_path: Optional[str]) -> Dict[str, Any]:
        entry: Dict[str, Any] = {'message': message}
        if line is not None:
            entry['line'] = line
        if column is not None:
            entry['column'] = column
        if yaml_path:
            entry['yaml_path'] = yaml_path
        return entry

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        """Add an error message.

        Args:
            message: Error message
            line: Optional 1-based line number where error occurred
        """
        self.errors.append(self._entry(message, line, column, yaml_path))

    def add_warning(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        yaml_path: Optional[str] = None,
    ):
        """Add a warning message."""
        self.warnings.append(self._entry(message, line, column, yaml_path))

    def add_diagnostic(self, diagnostic: YamlDiagnostic):
        line = diagnostic.location.line if diagnostic.location else None
        column = diagnostic.location.column if diagnostic.location else None
        if diagnostic.severity == "warning":
            self.add_warning(diagnostic.message, line, column, diagnostic.yaml_path)
        else:
            self.add_error(diagnostic.message, line, column, diagnostic.yaml_path)
