"""
Access to a directory of saved macros.

Functions:
    list_macros(path): Names of the entries in a macro directory.

Classes:
    MacroLibrary: Reads and parses macro files from one directory.

Listing never fails: a missing or unreadable directory lists as empty.
"""

import logging
import os

from macrolang.macrolang_ast import ASTNode
from macrolang.macrolang_parser import parse

logger = logging.getLogger(__name__)


def list_macros(path: str) -> list[str]:
    """Returns the entry names found in `path`, sorted by name.

    Errors reading the directory are swallowed and give an empty list.
    """
    try:
        return sorted(os.listdir(path))
    except OSError as e:
        logger.debug("Cannot list macro directory %r: %s", path, e)
        return []


class MacroLibrary:
    """A directory of macro source files.

    Attributes:
        directory (str): Directory holding the macro files.
        strict (bool): Parse loaded macros in strict mode.
    """

    def __init__(self, directory: str, strict: bool = False) -> None:
        self.directory = directory
        self.strict = strict

    def names(self) -> list[str]:
        return list_macros(self.directory)

    def path_of(self, name: str) -> str:
        if os.path.basename(name) != name or name in ("", ".", ".."):
            raise FileNotFoundError(f"Not a macro name: {name!r}")
        return os.path.join(self.directory, name)

    def read(self, name: str) -> str:
        """Returns the source text of macro `name`.

        Raises:
            FileNotFoundError: If no such macro exists in the directory.
            OSError: If the macro file is not valid UTF-8.
        """
        try:
            with open(self.path_of(name), encoding="utf-8") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise OSError(f"Macro {name!r} is not valid UTF-8: {e}") from e

    def load(self, name: str) -> ASTNode:
        """Reads and parses macro `name`, returning its root node."""
        logger.debug("Loading macro %r from %r", name, self.directory)
        return parse(self.read(name), strict=self.strict)


__all__ = ["MacroLibrary", "list_macros"]
