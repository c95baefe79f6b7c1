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

"""tree-sitter YAML grammar wrapped as a concrete syntax tree producer."""

import logging
from typing import Any, List, Optional

from tree_sitter_language_pack import get_parser

logger = logging.getLogger(__name__)


class ConcreteTree:
    """A parsed tree plus the text it came from.

    tree-sitter reports UTF-8 byte offsets; the accessors here translate them
    into string indices so callers never see bytes.
    """

    def __init__(self, root: Any, text: str):
        self.root = root
        self.text = text
        self._byte_to_char: Optional[List[int]] = None
        if not text.isascii():
            table: List[int] = []
            for index, char in enumerate(text):
                table.extend([index] * len(char.encode("utf-8")))
            table.append(len(text))
            self._byte_to_char = table

    @property
    def has_error(self) -> bool:
        """True when the root itself is an error node.

        Errors nested below the root do not count; the annotation builder
        recovers from those.
        """
        return self.root.type == "ERROR"

    def char_offset(self, byte_offset: int) -> int:
        if self._byte_to_char is None:
            return byte_offset
        byte_offset = max(0, min(byte_offset, len(self._byte_to_char) - 1))
        return self._byte_to_char[byte_offset]

    def start(self, node: Any) -> int:
        return self.char_offset(node.start_byte)

    def end(self, node: Any) -> int:
        return self.char_offset(node.end_byte)

    def node_text(self, node: Any) -> str:
        return self.text[self.start(node):self.end(node)]


class YamlParser:
    """Thin wrapper over the tree-sitter YAML parser."""

    def __init__(self, language: str = "yaml"):
        self.language = language
        self._parser = get_parser(language)

    def parse(self, text: str) -> ConcreteTree:
        tree = self._parser.parse(text.encode("utf-8"))
        return ConcreteTree(tree.root_node, text)


_parser: Optional[YamlParser] = None


def get_yaml_parser() -> YamlParser:
    """Return the process-wide parser, creating it on first use."""
    global _parser
    if _parser is None:
        logger.debug("Loading tree-sitter YAML grammar")
        _parser = YamlParser()
    return _parser
