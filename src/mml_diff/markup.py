"""MML markup emission for a ChangeTree."""
from __future__ import annotations

import xml.etree.ElementTree as ET

from .tree import ChangeNode, ChangeTree, format_value

INDENT = "    "


def to_element(node: ChangeNode) -> ET.Element:
    elem = ET.Element(node.name, {k: format_value(v) for k, v in node.attributes.items()})
    if node.text is not None:
        elem.text = node.text
    for child in node.children:
        elem.append(to_element(child))
    return elem


def render_markup(tree: ChangeTree) -> str:
    root = to_element(tree.root)
    ET.indent(root, space=INDENT)
    body = ET.tostring(root, encoding="unicode", short_empty_elements=True)
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f"<!--{tree.comment}-->\n"
        f"{body}\n"
    )


def write_markup(tree: ChangeTree, stream) -> None:
    stream.write(render_markup(tree))
