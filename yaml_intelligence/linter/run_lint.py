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

"""CLI entry point for linting YAML files against a schema registry."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List

from ..automation.dispatcher import YamlIntelligence
from ..config import IntelligenceConfig
from ..exceptions import SchemaLoadError, SchemaNotFoundError
from ..schema.registry import SchemaRegistry
from . import LintResult, lint_files

YAML_EXTENSIONS = ['.yaml', '.yml']


def find_yaml_files(paths: List[str]) -> List[Path]:
    """Find all YAML files in given paths."""
    yaml_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)
            continue

        if path.is_file():
            yaml_files.append(path)
        elif path.is_dir():
            # Recursively find all YAML files
            for ext in YAML_EXTENSIONS:
                yaml_files.extend(path.rglob(f'*{ext}'))
        else:
            print(f"Warning: Path is neither file nor directory: {path}", file=sys.stderr)

    return sorted(set(yaml_files))


def print_results(results: List[LintResult], output_format: str) -> None:
    if output_format == 'json':
        output = {
            'files': len(results),
            'errors': sum(len(r.errors) for r in results),
            'warnings': sum(len(r.warnings) for r in results),
            'results': [
                {
                    'file': str(r.file_path),
                    'errors': r.errors,
                    'warnings': r.warnings,
                }
                for r in results
            ]
        }
        print(json.dumps(output, indent=2))
    elif output_format == 'github-actions':
        for result in results:
            for error in result.errors:
                print(f"::error file={result.file_path},line={error.get('line', 1)},"
                      f"col={error.get('column', 1)}::{error['message']}")
            for warning in result.warnings:
                print(f"::warning file={result.file_path},line={warning.get('line', 1)}::{warning['message']}")
    else:  # human-readable
        for result in results:
            if result.errors or result.warnings:
                print(f"\n{result.file_path}:")
                for error in result.errors:
                    line_info = f":{error['line']}:{error.get('column', 1)}" if 'line' in error else ""
                    path_info = f" ({error['yaml_path']})" if 'yaml_path' in error else ""
                    print(f"  ERROR{line_info}{path_info}: {error['message']}")
                for warning in result.warnings:
                    line_info = f":{warning['line']}" if 'line' in warning else ""
                    print(f"  WARNING{line_info}: {warning['message']}")


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the linter CLI."""
    config = IntelligenceConfig.from_env()

    parser = argparse.ArgumentParser(
        description='Lint YAML files against JSON-Schema-like schemas',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to lint (default: current directory)',
    )
    parser.add_argument(
        '--schemas',
        default=config.schema_file or None,
        help='Schema registry file, JSON or YAML (default: $YAML_INTELLIGENCE_SCHEMA_FILE)',
    )
    parser.add_argument(
        '--schema',
        default=None,
        help='Schema name to validate against (default: chosen from the file extension)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )

    args = parser.parse_args(argv)
    config.set_logging(stdout_enabled=args.format == 'human')

    if not args.schemas:
        print("No schema registry given. Use --schemas or set YAML_INTELLIGENCE_SCHEMA_FILE.", file=sys.stderr)
        sys.exit(1)

    try:
        registry = SchemaRegistry.load(args.schemas)
        if args.schema:
            registry.get(args.schema)
    except (SchemaLoadError, SchemaNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.paths:
        args.paths = ['.']

    yaml_files = find_yaml_files(args.paths)

    if not yaml_files:
        print("No YAML files found.", file=sys.stderr)
        sys.exit(1)

    intelligence = YamlIntelligence(registry, config=config)
    results = asyncio.run(lint_files(yaml_files, intelligence, schema_name=args.schema))

    print_results(results, args.format)

    # Exit with error code if any errors found
    total_errors = sum(len(r.errors) for r in results)
    if total_errors > 0:
        sys.exit(1)
    if args.format == 'human':
        print("Lint succeeded with no errors.")
    sys.exit(0)


if __name__ == '__main__':
    main()
