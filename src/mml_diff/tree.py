"""Change tree: the sparse result of a diff pass."""
from __future__ import annotations

from dataclasses import dataclass, field

ROOT_NAME = "marathon"


def format_value(value) -> str:
    """Render an attribute the way the MML loader reads it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


@dataclass
class ChangeNode:
    name: str
    attributes: dict = field(default_factory=dict)
    children: list = field(default_factory=list)
    text: str | None = None

    def set(self, name: str, value) -> "ChangeNode":
        self.attributes[name] = value
        return self

    def append(self, child: "ChangeNode") -> "ChangeNode":
        self.children.append(child)
        return child

    def child(self, name: str) -> "ChangeNode":
        """Return the first child called ``name``, creating it if absent."""
        for c in self.children:
            if c.name == name:
                return c
        return self.append(ChangeNode(name))

    def add_child(self, path: str, node: "ChangeNode") -> "ChangeNode":
        """Append ``node`` under a dotted path of grouping nodes.

        Grouping nodes are reused; ``node`` is always appended.
        """
        parent = self
        for part in path.split(".") if path else []:
            parent = parent.child(part)
        return parent.append(node)

    def is_empty(self) -> bool:
        return not self.attributes and self.text is None and all(c.is_empty() for c in self.children)

    def find_all(self, path: str) -> list["ChangeNode"]:
        nodes = [self]
        for part in path.split("."):
            nodes = [c for n in nodes for c in n.children if c.name == part]
        return nodes

    def walk(self, prefix: str = ""):
        """Yield (path, node) pairs depth-first in emission order."""
        path = f"{prefix}/{self.name}" if prefix else self.name
        yield path, self
        for c in self.children:
            yield from c.walk(path)


@dataclass
class ChangeTree:
    comment: str
    root: ChangeNode = field(default_factory=lambda: ChangeNode(ROOT_NAME))
    diagnostics: list = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.root.is_empty()

    def add(self, path: str, node: ChangeNode) -> None:
        self.root.add_child(path, node)

    def find_all(self, path: str) -> list[ChangeNode]:
        return self.root.find_all(path)
