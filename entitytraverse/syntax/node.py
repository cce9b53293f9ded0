"""
Generic syntax tree used by the context builders and extractors.

Nodes hold their children in source order together with the grammar field
name each child was attached under. There is no parent pointer: anything a
visitor needs from an ancestor has to be passed down explicitly.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union


@dataclass
class SyntaxNode:
    type: str
    text: str = ""
    line: int = 0
    column: int = 0
    is_named: bool = True
    children: List["SyntaxNode"] = field(default_factory=list)
    field_names: List[Optional[str]] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        type: str,
        text: str = "",
        *,
        fields: Optional[Dict[str, Union["SyntaxNode", Sequence["SyntaxNode"]]]] = None,
        children: Iterable["SyntaxNode"] = (),
        line: int = 0,
        column: int = 0,
        is_named: bool = True,
    ) -> "SyntaxNode":
        """Build a node by hand; ``fields`` children come first, then ``children``."""
        node = cls(type=type, text=text, line=line, column=column, is_named=is_named)
        for name, value in (fields or {}).items():
            values = value if isinstance(value, (list, tuple)) else [value]
            for child in values:
                node.add_child(child, name)
        for child in children:
            node.add_child(child)
        return node

    def add_child(self, child: "SyntaxNode", field_name: Optional[str] = None) -> None:
        self.children.append(child)
        self.field_names.append(field_name)

    @property
    def start_point(self) -> Tuple[int, int]:
        return self.line, self.column

    @property
    def named_children(self) -> List["SyntaxNode"]:
        return [c for c in self.children if c.is_named]

    def child_by_field_name(self, name: str) -> Optional["SyntaxNode"]:
        for child, fname in zip(self.children, self.field_names):
            if fname == name:
                return child
        return None

    def children_by_field_name(self, name: str) -> List["SyntaxNode"]:
        return [c for c, fname in zip(self.children, self.field_names) if fname == name]

    def first_child_of_type(self, *types: str) -> Optional["SyntaxNode"]:
        for child in self.children:
            if child.type in types:
                return child
        return None

    def has_child_of_type(self, *types: str) -> bool:
        return self.first_child_of_type(*types) is not None

    def __repr__(self) -> str:
        return f"SyntaxNode({self.type!r}, line={self.line}, children={len(self.children)})"


def walk(root: Optional[SyntaxNode]) -> Iterator[SyntaxNode]:
    """Pre-order walk over ``root`` and all of its descendants."""
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))
