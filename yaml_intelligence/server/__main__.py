"""Module entrypoint for `python -m yaml_intelligence.server`."""

import argparse
import sys
from typing import List

from ..automation.dispatcher import YamlIntelligence
from ..config import IntelligenceConfig
from ..exceptions import SchemaLoadError
from ..schema.registry import SchemaRegistry
from .server import YamlIntelligenceLanguageServer


def main(argv: List[str] | None = None) -> None:
    config = IntelligenceConfig.from_env()

    parser = argparse.ArgumentParser(description='YAML intelligence language server (stdio)')
    parser.add_argument(
        '--schemas',
        default=config.schema_file or None,
        help='Schema registry file, JSON or YAML (default: $YAML_INTELLIGENCE_SCHEMA_FILE)',
    )
    args = parser.parse_args(argv)

    # stdout carries the protocol
    logger = config.set_logging(stdout_enabled=False)

    if not args.schemas:
        print("No schema registry given. Use --schemas or set YAML_INTELLIGENCE_SCHEMA_FILE.", file=sys.stderr)
        sys.exit(1)
    try:
        registry = SchemaRegistry.load(args.schemas)
    except SchemaLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Starting language server with schemas {sorted(registry.schemas)}")
    YamlIntelligenceLanguageServer(YamlIntelligence(registry, config=config)).start()


if __name__ == "__main__":
    main()
