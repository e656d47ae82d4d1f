"""
Shared vocabulary for the MACROLANG lexer and parser.

Token kinds form a closed tag set and double as AST node kinds. The keyword
set is fixed: every other word in a macro is read as an action name.
"""

FUNCTION = "Function"
KEYWORD = "Keyword"
STRING = "String"
NUMBER = "Number"

TOKEN_KINDS: tuple[str, ...] = (FUNCTION, KEYWORD, STRING, NUMBER)

LOOP = "loop"
END = "end"
FOREVER = "forever"

KEYWORDS: frozenset[str] = frozenset({LOOP, END, FOREVER})

# Sentinel value carried by the parser's root node (kind FUNCTION).
ROOT_VALUE = "root"

QUOTE = '"'

__all__ = [
    "END",
    "FOREVER",
    "FUNCTION",
    "KEYWORD",
    "KEYWORDS",
    "LOOP",
    "NUMBER",
    "QUOTE",
    "ROOT_VALUE",
    "STRING",
    "TOKEN_KINDS",
]
