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

"""Linter package validating YAML files against registered schemas."""

import logging
from pathlib import Path
from typing import List, Optional

from ..automation.dispatcher import EditorContext, YamlIntelligence
from ..exceptions import SchemaLoadError, SchemaNotFoundError
from .report import LintResult

__all__ = ['lint_files', 'LintResult']

logger = logging.getLogger(__name__)


async def lint_files(
    file_paths: List[Path],
    intelligence: YamlIntelligence,
    schema_name: Optional[str] = None,
) -> List[LintResult]:
    """Lint a list of YAML files.

    Args:
        file_paths: List of file paths to lint
        intelligence: Engine holding the schema registry and validator cache
        schema_name: Schema to validate against; chosen from the file name when omitted

    Returns:
        List of LintResult objects, one per file
    """
    results = []

    for file_path in file_paths:
        result = LintResult(file_path)
        try:
            code = file_path.read_text(encoding='utf-8')
            context = EditorContext(filetype='yaml', code=code, path=str(file_path), schema_name=schema_name)
            for diagnostic in await intelligence.get_lint(context):
                result.add_diagnostic(diagnostic)
        except (OSError, UnicodeDecodeError, SchemaLoadError, SchemaNotFoundError) as e:
            logger.debug(f"Linting {file_path} failed: {e}")
            result.add_error(f"Unexpected error during linting: {str(e)}")

        results.append(result)

    return results
