"""
Defines the abstract syntax tree (AST) node structure for MACROLANG.

Classes:
    ASTNode:
        A node in the macro syntax tree, produced by the parser and consumed by
        the formatter and the CLI.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python
        dictionaries, suitable for JSON output or debugging.

Each ASTNode tracks:
    kind (str): A token kind tag (`Function`, `Keyword`, `String`, `Number`).
    value (str): The literal, action name, or keyword text.
    children (list[ASTNode]): Owned child nodes, in source order.
    line (int): Source line number for error messages.
    col (int): Source column number for error messages.

Action arguments are not nested under their action: `click "left"` yields two
sibling nodes. Only `loop` and `forever` keyword nodes (and the root) own
children. The root node is `ASTNode("Function", "root")`.

Example:
    node = ASTNode("Keyword", "loop", [ASTNode("Number", "3"), ASTNode("Function", "click")])
"""

from typing import Any, TypedDict


class ASTDict(TypedDict):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The node kind tag.
        value (str): The node's literal text.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        children (list[ASTDict]): Child nodes in source order.
    """

    kind: str
    value: str
    line: int
    col: int
    children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) of a macro.

    Args:
        kind (str): The node kind tag (mirrors the originating token kind).
        value (str): The node's literal text.
        children (list[ASTNode], optional): Child nodes in the syntax tree.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).

    Methods:
        __repr__(): Returns a structured string representation for debugging.
        __eq__(other): Checks structural equality with another ASTNode.
        to_dict(): Converts the node (and all descendants) into a nested dictionary format.
    """

    def __init__(
        self,
        kind: str,
        value: str = "",
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return self._repr(depth=3)

    def _repr(self, depth: int) -> str:
        parts = [f"{self.kind}", f"value={self.value!r}"]
        if self.children and depth == 0:
            parts.append("children=[...]")
        elif self.children:
            preview = ", ".join(c._repr(depth - 1) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        # Iterative so deeply nested macros compare without hitting the recursion limit.
        pending: list[tuple[ASTNode, Any]] = [(self, other)]
        while pending:
            a, b = pending.pop()
            if not isinstance(b, ASTNode):
                return False
            if (
                a.kind != b.kind
                or a.value != b.value
                or a.line != b.line
                or a.col != b.col
                or len(a.children) != len(b.children)
            ):
                return False
            pending.extend(zip(a.children, b.children))
        return True

    def _shallow_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "value": self.value,
            "line": self.line,
            "col": self.col,
            "children": [],
        }

    def to_dict(self) -> ASTDict:
        result = self._shallow_dict()
        pending: list[tuple[ASTNode, ASTDict]] = [(self, result)]
        while pending:
            node, data = pending.pop()
            for child in node.children:
                child_data = child._shallow_dict()
                data["children"].append(child_data)
                pending.append((child, child_data))
        return result


def format_tree(node: ASTNode, indent: str = "  ") -> str:
    """Renders a node and its descendants one per line, children indented under parents.

    >>> print(format_tree(ASTNode("Function", "root", [ASTNode("Function", "click")])))
    Function 'root'
      Function 'click'
    """
    lines: list[str] = []
    pending: list[tuple[ASTNode, int]] = [(node, 0)]
    while pending:
        current, depth = pending.pop()
        lines.append(f"{indent * depth}{current.kind} {current.value!r}")
        pending.extend((child, depth + 1) for child in reversed(current.children))
    return "\n".join(lines)


__all__ = ["ASTDict", "ASTNode", "format_tree"]
