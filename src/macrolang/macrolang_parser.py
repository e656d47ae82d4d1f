"""
MACROLANG Parser

Parses macro tokens into a single abstract syntax tree rooted at
`ASTNode("Function", "root")`.

Supported Constructs
--------------------
- Actions and their arguments: `click "left"`, `mouseset 10 10`. Arguments are
  flat siblings of the action, not children of it.
- Bounded loops: `loop <count> ... end`. The count becomes the first child of
  the loop node, followed by the body.
- Unbounded loops: `forever ...`. The body always runs to the end of input.

Parser Behavior
---------------
- A single cursor (`Parser.position`) moves forward through the token list.
  Open blocks are tracked on an explicit stack inside `parse_block`, so
  deeply nested macros do not hit the recursion limit.
- `end` closes the innermost open `loop` and emits no node. An `end` with no
  enclosing `loop` ends parsing at that level and drops the tokens after it.
- Lenient mode (the default) never raises on lexer output: a `loop` with no
  count gets a synthesized count of `0`, unclosed loops run to end of input.
- Strict mode raises `MacroSyntaxError` (or `UnexpectedEndOfInput`) for a missing
  loop count, a stray `end`, and an unclosed `loop`.

Entry Points
------------
- `parse(source, strict=False)`: Lex and parse macro source text.
- `Parser(tokens).parse()`: Parse an already tokenized macro.

Raises
------
MacroSyntaxError
    For malformed block structure in strict mode, or for token lists the lexer
    cannot produce (unknown kinds or keywords).
"""

from __future__ import annotations

import logging

from macrolang.macrolang_ast import ASTNode
from macrolang.macrolang_constants import (
    END,
    FOREVER,
    FUNCTION,
    KEYWORD,
    LOOP,
    NUMBER,
    ROOT_VALUE,
    STRING,
)
from macrolang.macrolang_lexer import Token, tokenize

logger = logging.getLogger(__name__)


class MacroSyntaxError(SyntaxError):
    """Raised when a token sequence cannot be turned into a macro tree.

    Attributes:
        line (int): Line of the offending token (0 if unknown).
        col (int): Column of the offending token (0 if unknown).
    """

    def __init__(self, message: str, line: int = 0, col: int = 0):
        if line:
            message = f"{message} (line {line}, col {col})"
        super().__init__(message)
        self.line = line
        self.col = col


class UnexpectedEndOfInput(MacroSyntaxError):
    """Raised when the token stream ends where more tokens are required."""


class Parser:
    """
    MACROLANG Parser Class

    Turns a list of tokens into one AST. A parser instance owns its cursor and
    is meant to be used for a single `parse()` call.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream to be parsed.
    position : int
        Current index into the token stream.
    strict : bool
        Raise on malformed block structure instead of recovering.
    """

    def __init__(self, tokens: list[Token], strict: bool = False) -> None:
        self.tokens: list[Token] = tokens
        self.position: int = 0
        self.strict: bool = strict

    @classmethod
    def from_source(cls, source: str, strict: bool = False) -> Parser:
        return cls(tokenize(source), strict=strict)

    def current(self) -> Token | None:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def advance(self) -> None:
        self.position += 1

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def parse(self) -> ASTNode:
        """Parse the whole token list and return the root node."""
        logger.debug("Parsing %d tokens (strict=%s)", len(self.tokens), self.strict)
        root = ASTNode(FUNCTION, ROOT_VALUE)
        closed = self.parse_block(root)
        if closed:
            tok = self.tokens[self.position - 1]
            if self.strict:
                raise MacroSyntaxError("'end' without matching 'loop'", tok.line, tok.col)
            logger.debug(
                "Stray 'end' at line %d, col %d: ignoring %d trailing tokens",
                tok.line,
                tok.col,
                len(self.tokens) - self.position,
            )
        logger.debug("Parsed %d top-level nodes", len(root.children))
        return root

    def parse_block(self, parent: ASTNode) -> bool:
        """Append nodes to `parent` until an unmatched `end` or the end of input.

        Open `loop`/`forever` blocks are kept on an explicit stack, so nesting
        depth is not limited by the interpreter's recursion limit. Each `end`
        closes the innermost open `loop`.

        Returns
        -------
        bool
            True if `parent` itself was closed by an `end` (which is consumed),
            False if the token stream ran out.
        """
        blocks: list[ASTNode] = [parent]
        while not self.at_end():
            tok = self.tokens[self.position]
            block = blocks[-1]

            if tok.kind in (FUNCTION, STRING, NUMBER):
                block.children.append(ASTNode(tok.kind, tok.value, line=tok.line, col=tok.col))
                self.advance()
            elif tok.kind == KEYWORD:
                self.advance()
                if tok.value == END:
                    if len(blocks) == 1:
                        return True
                    if block.value == FOREVER:
                        self.ignore_end_in_forever(tok)
                    else:
                        blocks.pop()
                elif tok.value == LOOP:
                    node = ASTNode(KEYWORD, tok.value, line=tok.line, col=tok.col)
                    node.children.append(self.parse_loop_count(tok))
                    block.children.append(node)
                    blocks.append(node)
                elif tok.value == FOREVER:
                    node = ASTNode(KEYWORD, tok.value, line=tok.line, col=tok.col)
                    block.children.append(node)
                    blocks.append(node)
                else:
                    raise MacroSyntaxError(f"Unknown keyword {tok.value!r}", tok.line, tok.col)
            else:
                raise MacroSyntaxError(f"Unknown token kind {tok.kind!r}", tok.line, tok.col)

        # innermost first
        for block in reversed(blocks[1:]):
            if block.value == LOOP:
                if self.strict:
                    raise UnexpectedEndOfInput(
                        "'loop' block is never closed by 'end'", block.line, block.col
                    )
                logger.debug("'loop' at line %d runs to end of input", block.line)
        return False

    def ignore_end_in_forever(self, tok: Token) -> None:
        # `forever` has no terminator and always runs to the end of input.
        if self.strict:
            raise MacroSyntaxError("'end' cannot close a 'forever' block", tok.line, tok.col)
        logger.debug("Ignoring 'end' inside 'forever' at line %d", tok.line)

    def parse_loop_count(self, loop_tok: Token) -> ASTNode:
        """Consume the count that follows `loop`, or synthesize `0` in lenient mode."""
        tok = self.current()
        if tok is None:
            if self.strict:
                raise UnexpectedEndOfInput(
                    "Expected loop count after 'loop'", loop_tok.line, loop_tok.col
                )
            logger.debug("'loop' at end of input; using count 0")
            return ASTNode(NUMBER, "0")
        if tok.kind != NUMBER:
            if self.strict:
                raise MacroSyntaxError(
                    f"Expected loop count after 'loop', got {tok}", tok.line, tok.col
                )
            # Unlike a plain positional read, the non-number token is left in
            # place and parsed as the first statement of the loop body.
            logger.debug("'loop' followed by %r; using count 0", tok)
            return ASTNode(NUMBER, "0")
        self.advance()
        return ASTNode(NUMBER, tok.value, line=tok.line, col=tok.col)


def parse(source: str, strict: bool = False) -> ASTNode:
    """Lex and parse macro source text, returning the root node."""
    return Parser.from_source(source, strict=strict).parse()


__all__ = ["MacroSyntaxError", "Parser", "UnexpectedEndOfInput", "parse"]
