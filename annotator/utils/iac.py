"""Infrastructure-as-code helpers.

Templates are composed rather than loaded so that every node keeps the
source marks rules need to anchor findings to lines.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

import yaml

FUNCTION_TYPES = frozenset({"AWS::Serverless::Function", "AWS::Lambda::Function"})


def compose_template(text: str) -> Optional[yaml.Node]:
    """Compose a SAM/CloudFormation template into a positioned node tree.

    Returns ``None`` for an empty document. Raises ``yaml.YAMLError`` when the
    text is not valid YAML and ``ValueError`` when the root is not a mapping.
    """

    root = yaml.compose(text, Loader=yaml.SafeLoader)
    if root is None:
        return None
    if not isinstance(root, yaml.MappingNode):
        raise ValueError("Template root is not a mapping")
    return root


def iter_mapping(node: Optional[yaml.Node]) -> Iterator[Tuple[str, yaml.Node, yaml.Node]]:
    """Yield ``(key, key_node, value_node)`` for scalar keys of a mapping node."""

    if not isinstance(node, yaml.MappingNode):
        return
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode):
            yield key_node.value, key_node, value_node


def mapping_value(node: Optional[yaml.Node], key: str) -> Optional[yaml.Node]:
    for name, _key_node, value_node in iter_mapping(node):
        if name == key:
            return value_node
    return None


def mapping_path(node: Optional[yaml.Node], *keys: str) -> Optional[yaml.Node]:
    """Follow ``keys`` through nested mappings, returning ``None`` on a miss."""

    current = node
    for key in keys:
        current = mapping_value(current, key)
        if current is None:
            return None
    return current


def iter_sequence(node: Optional[yaml.Node]) -> Iterator[yaml.Node]:
    """Yield sequence items; a lone mapping or scalar is treated as one item."""

    if node is None:
        return
    if isinstance(node, yaml.SequenceNode):
        yield from node.value
    else:
        yield node


def scalar_values(node: Optional[yaml.Node]) -> Iterator[str]:
    for item in iter_sequence(node):
        if isinstance(item, yaml.ScalarNode):
            yield item.value


def is_intrinsic(node: Optional[yaml.Node]) -> bool:
    """Return True for ``!Ref``-style tags and ``Fn::``/``Ref`` long forms."""

    if node is None:
        return False
    if node.tag.startswith("!"):
        return True
    if isinstance(node, yaml.MappingNode) and len(node.value) == 1:
        key_node = node.value[0][0]
        if isinstance(key_node, yaml.ScalarNode):
            return key_node.value == "Ref" or key_node.value.startswith("Fn::")
    return False


def iter_resources(root: Optional[yaml.Node]) -> Iterator[Tuple[str, yaml.Node, yaml.Node, str]]:
    """Yield ``(logical_id, key_node, resource_node, resource_type)``."""

    for logical_id, key_node, resource_node in iter_mapping(mapping_value(root, "Resources")):
        type_node = mapping_value(resource_node, "Type")
        resource_type = type_node.value if isinstance(type_node, yaml.ScalarNode) else ""
        yield logical_id, key_node, resource_node, resource_type


def _last_line(node: yaml.Node) -> int:
    if isinstance(node, yaml.MappingNode):
        children = [child for pair in node.value for child in pair]
    elif isinstance(node, yaml.SequenceNode):
        children = list(node.value)
    else:
        children = []
    if children:
        return max(_last_line(child) for child in children)
    end = node.end_mark
    line = end.line
    # block scalars end at column 0 of the following line
    if end.column == 0 and line > node.start_mark.line:
        line -= 1
    return line + 1


def node_span(node: yaml.Node, key_node: Optional[yaml.Node] = None) -> Tuple[int, int]:
    """Return the 1-based ``(start, end)`` lines covered by a node.

    When ``key_node`` is given the span starts at the key, so a mapping entry
    is anchored where its name is written rather than on its first child.
    """

    anchor = key_node if key_node is not None else node
    start = anchor.start_mark.line + 1
    end = max(start, _last_line(node))
    return start, end
