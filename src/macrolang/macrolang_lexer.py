"""
Lexical analyzer for the MACROLANG macro scripting language.

This module converts raw macro source into an ordered list of tokens:

Classes:
    CharacterStream: Forward-only character cursor with line/column tracking.
    Token: A single classified lexical unit (kind, value, source location).
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace between tokens
    - Recognizes:
        * Words, classified as keywords (`loop`, `end`, `forever`) or action names
        * Integer literals, normalized to canonical decimal text
        * Double-quoted strings (verbatim, no escape sequences)

The lexer never raises on malformed input. A number that does not parse
becomes `0` and an unterminated string swallows the remainder of the source.

Example:
    >>> tokenize('click "left"')
    [Token(Function, click), Token(String, left)]

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

from typing import Any

from macrolang.macrolang_constants import FUNCTION, KEYWORD, KEYWORDS, NUMBER, QUOTE, STRING


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    The cursor only moves forward. Positions are recorded on every token so the
    parser can point at the offending spot when it reports a structural error.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in a macro.

    Attributes:
        kind (str): One of `Function`, `Keyword`, `String`, `Number`.
        value (str): Word text, unquoted string contents, or canonical decimal text.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    def __init__(self, kind: str, value: str, line: int = 0, col: int = 0):
        self.kind = kind
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.line, self.col))


def is_digit(ch: str) -> bool:
    """True for the ASCII decimal digits that open a number literal."""
    return ch.isascii() and ch.isdigit()


class Lexer:
    """Lexical analyzer for macro source.

    Each call to `next_token` performs one character-class dispatch at the
    cursor. After a token is read the cursor steps over exactly one more
    character: the closing quote of a string, or the whitespace that ended a
    word or number.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek().isspace():
            self.advance()

    def read_word(self) -> str:
        """Reads characters up to (not including) the next whitespace."""
        word = ""
        while not self.stream.end_of_file() and not self.peek().isspace():
            word += self.advance()
        return word

    def read_string(self) -> str:
        """Reads a string literal, leaving the cursor on the closing quote.

        The opening quote is skipped. If the literal is never closed, the
        contents run to the end of the source.
        """
        self.advance()
        val = ""
        while not self.stream.end_of_file() and self.peek() != QUOTE:
            val += self.advance()
        return val

    def read_number(self) -> str:
        """Reads a number literal as canonical decimal text; anything but a plain digit run yields "0"."""
        text = self.read_word()
        if text.isascii() and text.isdigit():
            return text.lstrip("0") or "0"
        return "0"

    def next_token(self) -> Token | None:
        """Consumes and returns the next Token, or None once the source is exhausted."""
        self.skip_whitespace()
        if self.stream.end_of_file():
            return None

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        if ch == QUOTE:
            token = Token(STRING, self.read_string(), line, col)
        elif is_digit(ch):
            token = Token(NUMBER, self.read_number(), line, col)
        else:
            word = self.read_word()
            token = Token(KEYWORD if word in KEYWORDS else FUNCTION, word, line, col)

        # Separator step: closing quote or the whitespace that ended the token.
        if not self.stream.end_of_file():
            self.advance()
        return token

    def tokenize(self) -> list[Token]:
        """Reads every remaining token from the stream, in source order."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens


def tokenize(source: str) -> list[Token]:
    """Tokenizes a complete macro source string. Never raises."""
    return Lexer(CharacterStream(source)).tokenize()


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
