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

"""Build value trees annotated with source ranges from a YAML syntax tree."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import yaml

from ..exceptions import UnsupportedNodeKindError
from ..text.mapped_text import MappedText, as_mapped_text
from .tree_sitter_yaml import ConcreteTree, YamlParser, get_yaml_parser

logger = logging.getLogger(__name__)

EMPTY_KIND = "<<EMPTY>>"
ERROR_MARKER = "<<ERROR>>"

# named children that never carry a value of their own
_DECORATION_KINDS = frozenset({
    "comment", "anchor", "tag", "yaml_directive", "tag_directive", "reserved_directive",
})


class NodeKind(str, Enum):
    STREAM = "stream"
    DOCUMENT = "document"
    BLOCK_NODE = "block_node"
    FLOW_NODE = "flow_node"
    BLOCK_SEQUENCE = "block_sequence"
    BLOCK_SEQUENCE_ITEM = "block_sequence_item"
    FLOW_SEQUENCE = "flow_sequence"
    BLOCK_MAPPING = "block_mapping"
    BLOCK_MAPPING_PAIR = "block_mapping_pair"
    FLOW_MAPPING = "flow_mapping"
    FLOW_PAIR = "flow_pair"
    PLAIN_SCALAR = "plain_scalar"
    DOUBLE_QUOTE_SCALAR = "double_quote_scalar"
    SINGLE_QUOTE_SCALAR = "single_quote_scalar"
    BLOCK_SCALAR = "block_scalar"
    ALIAS = "alias"
    ERROR = "ERROR"


MAPPING_KINDS = frozenset({NodeKind.BLOCK_MAPPING.value, NodeKind.FLOW_MAPPING.value})
SEQUENCE_KINDS = frozenset({NodeKind.BLOCK_SEQUENCE.value, NodeKind.FLOW_SEQUENCE.value})


@dataclass
class AnnotatedNode:
    """A parsed value together with the original source range it came from.

    For mappings, ``components`` alternates key node / value node so that the
    ranges of individual keys stay addressable.
    """

    start: int
    end: int
    result: Any
    kind: str
    components: List["AnnotatedNode"] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.kind == EMPTY_KIND

    @property
    def is_mapping(self) -> bool:
        return self.kind in MAPPING_KINDS

    @property
    def is_sequence(self) -> bool:
        return self.kind in SEQUENCE_KINDS

    def pairs(self):
        """Iterate ``(key_node, value_node)`` pairs of a mapping node."""
        for i in range(0, len(self.components) - 1, 2):
            yield self.components[i], self.components[i + 1]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON literal")


def _plain_value(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def _quoted_value(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text[1:-1] if len(text) >= 2 else text


def _block_scalar_value(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


class _Builder:
    def __init__(self, tree: ConcreteTree, mapped: MappedText):
        self.tree = tree
        self.mapped = mapped

    # helpers

    def annotate(self, node: Any, result: Any, components: Optional[List[AnnotatedNode]] = None,
                 kind: Optional[str] = None) -> AnnotatedNode:
        return AnnotatedNode(
            start=self.mapped.map_closest(self.tree.start(node)),
            end=self.mapped.map_closest(self.tree.end(node)),
            result=result,
            kind=kind or node.type,
            components=components or [],
        )

    def annotate_empty(self, position: int) -> AnnotatedNode:
        mapped_position = self.mapped.map_closest(position)
        return AnnotatedNode(mapped_position, mapped_position, None, EMPTY_KIND, [])

    @staticmethod
    def value_children(node: Any) -> List[Any]:
        return [child for child in node.children
                if child.is_named and child.type not in _DECORATION_KINDS]

    def build(self, node: Any) -> Optional[AnnotatedNode]:
        if node is None:
            return None
        rule = _RULES.get(node.type)
        if rule is None:
            raise UnsupportedNodeKindError(node.type)
        return rule(self, node)

    def key_node(self, node: Any) -> AnnotatedNode:
        built = self.build(node)
        if built is not None and isinstance(built.result, str):
            return AnnotatedNode(built.start, built.end, built.result, built.kind, [])
        return self.annotate(node, self.tree.node_text(node))

    # rules

    def wrapper(self, node: Any) -> Optional[AnnotatedNode]:
        children = self.value_children(node)
        if not children:
            return None
        return self.build(children[0])

    def block_sequence(self, node: Any) -> AnnotatedNode:
        result, components = [], []
        for child in node.children:
            if child.type != NodeKind.BLOCK_SEQUENCE_ITEM.value:
                continue
            component = self.build(child)
            components.append(component)
            result.append(component.result)
        return self.annotate(node, result, components)

    def block_sequence_item(self, node: Any) -> AnnotatedNode:
        children = self.value_children(node)
        item = self.build(children[0]) if children else None
        if item is None:
            return self.annotate_empty(self.tree.end(node))
        return item

    def flow_sequence(self, node: Any) -> AnnotatedNode:
        result, components = [], []
        for child in node.children:
            if child.type != NodeKind.FLOW_NODE.value:
                continue
            component = self.build(child)
            if component is None:
                continue
            components.append(component)
            result.append(component.result)
        return self.annotate(node, result, components)

    def mapping(self, node: Any) -> AnnotatedNode:
        result: Dict[str, Any] = {}
        components: List[AnnotatedNode] = []
        for child in node.children:
            if not child.is_named or child.type == "comment":
                continue
            if child.type == NodeKind.ERROR.value:
                # malformed pair: keep the raw text as a key so completion still works
                text = self.tree.node_text(child)
                key = self.annotate(child, text)
                value = self.annotate_empty(self.tree.end(child))
                result[text] = ERROR_MARKER
                components.extend([key, value])
                continue
            if child.type in (NodeKind.BLOCK_MAPPING_PAIR.value, NodeKind.FLOW_PAIR.value):
                key, value = self.pair(child)
            elif child.type == NodeKind.FLOW_NODE.value and node.type == NodeKind.FLOW_MAPPING.value:
                key, value = self.key_node(child), self.annotate_empty(self.tree.end(child))
            else:
                raise UnsupportedNodeKindError(child.type, f"inside {node.type}")
            result[key.result] = value.result
            components.extend([key, value])
        return self.annotate(node, result, components)

    def pair(self, node: Any):
        key_child = node.child_by_field_name("key")
        value_child = node.child_by_field_name("value")
        pair_end = self.tree.end(node)
        if key_child is None:
            return self.annotate_empty(pair_end), self.annotate_empty(pair_end)
        key = self.key_node(key_child)
        value = self.build(value_child) if value_child is not None else None
        if value is None:
            # "key:" with nothing after the colon yet
            value = self.annotate_empty(pair_end)
        return key, value

    def mapping_pair(self, node: Any) -> AnnotatedNode:
        key, value = self.pair(node)
        return self.annotate(node, {"key": key.result, "value": value.result}, [key, value])

    def plain_scalar(self, node: Any) -> AnnotatedNode:
        return self.annotate(node, _plain_value(self.tree.node_text(node)))

    def quoted_scalar(self, node: Any) -> AnnotatedNode:
        return self.annotate(node, _quoted_value(self.tree.node_text(node)))

    def block_scalar(self, node: Any) -> AnnotatedNode:
        return self.annotate(node, _block_scalar_value(self.tree.node_text(node)))

    def raw_scalar(self, node: Any) -> AnnotatedNode:
        return self.annotate(node, self.tree.node_text(node))


_RULES: Dict[str, Callable[[_Builder, Any], Optional[AnnotatedNode]]] = {
    NodeKind.STREAM.value: _Builder.wrapper,
    NodeKind.DOCUMENT.value: _Builder.wrapper,
    NodeKind.BLOCK_NODE.value: _Builder.wrapper,
    NodeKind.FLOW_NODE.value: _Builder.wrapper,
    NodeKind.BLOCK_SEQUENCE.value: _Builder.block_sequence,
    NodeKind.BLOCK_SEQUENCE_ITEM.value: _Builder.block_sequence_item,
    NodeKind.FLOW_SEQUENCE.value: _Builder.flow_sequence,
    NodeKind.BLOCK_MAPPING.value: _Builder.mapping,
    NodeKind.BLOCK_MAPPING_PAIR.value: _Builder.mapping_pair,
    NodeKind.FLOW_MAPPING.value: _Builder.mapping,
    NodeKind.FLOW_PAIR.value: _Builder.mapping_pair,
    NodeKind.PLAIN_SCALAR.value: _Builder.plain_scalar,
    NodeKind.DOUBLE_QUOTE_SCALAR.value: _Builder.quoted_scalar,
    NodeKind.SINGLE_QUOTE_SCALAR.value: _Builder.quoted_scalar,
    NodeKind.BLOCK_SCALAR.value: _Builder.block_scalar,
    NodeKind.ALIAS.value: _Builder.raw_scalar,
    NodeKind.ERROR.value: _Builder.raw_scalar,
}

_missing_rules = {kind.value for kind in NodeKind} ^ set(_RULES)
if _missing_rules:
    raise RuntimeError(f"Annotated YAML builder rules out of sync with NodeKind: {sorted(_missing_rules)}")


def build_annotated(tree: ConcreteTree, mapped: Union[str, MappedText]) -> AnnotatedNode:
    """Convert a syntax tree over ``mapped`` into a single annotated root node.

    Raises:
        UnsupportedNodeKindError: If the tree holds a node kind without a rule.
    """
    builder = _Builder(tree, as_mapped_text(mapped))
    root = builder.build(tree.root)
    if root is None:
        return builder.annotate_empty(0)
    return root


def read_annotated_yaml(text: Union[str, MappedText], parser: Optional[YamlParser] = None) -> AnnotatedNode:
    """Parse and annotate in one step."""
    mapped = as_mapped_text(text)
    tree = (parser or get_yaml_parser()).parse(mapped.value)
    return build_annotated(tree, mapped)


def node_at_path(root: AnnotatedNode, path: Sequence[Union[str, int]]) -> AnnotatedNode:
    """Return the deepest node reachable along ``path``."""
    node = root
    for segment in path:
        child = None
        if node.is_mapping:
            for key, value in node.pairs():
                if key.result == segment or str(key.result) == str(segment):
                    child = value
                    break
        elif node.is_sequence and isinstance(segment, int) and 0 <= segment < len(node.components):
            child = node.components[segment]
        if child is None:
            break
        node = child
    return node
