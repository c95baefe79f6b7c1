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

"""Configuration management for the YAML intelligence engine."""

import logging
import os
from dataclasses import dataclass, field
from typing import Tuple

from .utils.logging_utils import configure_split_stream_logging, level_from_name

ENV_PREFIX = "YAML_INTELLIGENCE_"


@dataclass
class IntelligenceConfig:
    """Configuration class for completion and validation requests."""
    log_level: str = "INFO"
    print_level: str = "WARNING"

    # schemas
    schema_file: str = ""
    yaml_schema: str = "config"
    front_matter_schema: str = "front-matter"
    front_matter_extensions: Tuple[str, ...] = field(default=(".qmd", ".md", ".rmd"))

    @classmethod
    def from_env(cls) -> 'IntelligenceConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv(f'{ENV_PREFIX}LOG_LEVEL', 'INFO'),
            print_level=os.getenv(f'{ENV_PREFIX}PRINT_LEVEL', 'WARNING'),
            schema_file=os.getenv(f'{ENV_PREFIX}SCHEMA_FILE', ''),
            yaml_schema=os.getenv(f'{ENV_PREFIX}YAML_SCHEMA', 'config'),
            front_matter_schema=os.getenv(f'{ENV_PREFIX}FRONT_MATTER_SCHEMA', 'front-matter'),
        )

    def schema_for_path(self, path: str) -> str:
        """Schema name used for a standalone YAML document at ``path``."""
        if path.lower().endswith(self.front_matter_extensions):
            return self.front_matter_schema
        return self.yaml_schema

    def set_logging(self, stdout_enabled: bool = True) -> logging.Logger:
        """Setup logging based on configuration."""
        level = level_from_name(self.log_level, logging.INFO)
        stderr_level = level_from_name(self.print_level, logging.WARNING)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(
            level=level, stderr_level=stderr_level, formatter=formatter, stdout_enabled=stdout_enabled)

        return logging.getLogger('yaml_intelligence')
