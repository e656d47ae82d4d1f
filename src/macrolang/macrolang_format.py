"""
Renders MACROLANG syntax trees back into canonical macro source.

This module defines the `MacroFormatter` class, which walks a parsed tree and
emits one action per line with its arguments on the same line, indenting
block bodies:

    mouseset 10 10
    loop 3
      click "left"
    end
    forever
      keypress "a"

Behavior:
    - `Function` nodes start a new line; `String` and `Number` nodes are appended
      to the line currently open at their block level.
    - `loop` emits its count on the header line and closes with `end`.
    - `forever` has no terminator.
    - Output lines are retrieved with `get_output()`.

Raises:
    - `NotImplementedError`: If a node kind or keyword has no emitter.
"""

from macrolang.macrolang_ast import ASTNode
from macrolang.macrolang_constants import END, FOREVER, LOOP, QUOTE


class MacroFormatter:
    """Emits macro source text from AST nodes.

    Attributes:
        lines (list[str]): Accumulated output lines.
        indent (int): Current block depth.
        width (int): Spaces per block level.
    """

    def __init__(self, indent: int = 2) -> None:
        self.lines: list[str] = []
        self.indent = 0
        self.width = indent
        # Index of the line that trailing arguments attach to, or None when
        # the next argument must start a fresh line.
        self.open_line: int | None = None

    def indent_str(self) -> str:
        return " " * (self.width * self.indent)

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def start_line(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}{text}")
        self.open_line = len(self.lines) - 1

    def close_line(self) -> None:
        self.open_line = None

    def append_argument(self, text: str) -> None:
        if self.open_line is None:
            self.start_line(text)
        else:
            self.lines[self.open_line] += f" {text}"

    def emit_Function(self, node: ASTNode) -> None:
        self.start_line(node.value)

    def emit_String(self, node: ASTNode) -> None:
        self.append_argument(f"{QUOTE}{node.value}{QUOTE}")

    def emit_Number(self, node: ASTNode) -> None:
        self.append_argument(node.value)

    def emit_Keyword(self, node: ASTNode) -> tuple[list[ASTNode], str | None]:
        """Emits a block header and returns its body plus the closing line (if any)."""
        if node.value == LOOP:
            count, body = node.children[:1], node.children[1:]
            self.start_line(LOOP if not count else f"{LOOP} {count[0].value}")
            return body, END
        if node.value == FOREVER:
            self.start_line(FOREVER)
            return node.children, None
        raise NotImplementedError(f"MacroFormatter: no emitter for keyword {node.value!r}")

    def emit_body(self, children: list[ASTNode]) -> None:
        """Emits `children` and every nested block body.

        Pending work is kept on an explicit stack: either a node to emit or a
        `BlockEnd` marking where an indented body finishes.
        """
        self.close_line()
        pending: list[ASTNode | BlockEnd] = list(reversed(children))
        while pending:
            item = pending.pop()
            if isinstance(item, BlockEnd):
                self.close_line()
                self.indent -= 1
                if item.text is not None:
                    self.start_line(item.text)
                self.close_line()
                continue
            block = self._visit(item)
            if block is not None:
                body, terminator = block
                self.close_line()
                self.indent += 1
                pending.append(BlockEnd(terminator))
                pending.extend(reversed(body))
        self.close_line()

    def _visit(self, node: ASTNode) -> tuple[list[ASTNode], str | None] | None:
        meth = getattr(self, f"emit_{node.kind}", None)
        if not meth:
            raise NotImplementedError(f"MacroFormatter: no emitter for {node.kind}")
        return meth(node)


class BlockEnd:
    """Marks the end of an indented block body; `text` is the closing line, if any."""

    def __init__(self, text: str | None) -> None:
        self.text = text


def format_macro(root: ASTNode, indent: int = 2) -> str:
    """Formats the children of a parsed macro's root node as source text."""
    formatter = MacroFormatter(indent=indent)
    formatter.emit_body(root.children)
    return formatter.get_output()


__all__ = ["MacroFormatter", "format_macro"]
