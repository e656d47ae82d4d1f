"""
MACROLANG CLI Entrypoint.

This module provides the command-line interface for inspecting macro files.

Features:
    - Read source from macro files or inline strings.
    - Show the token stream, the syntax tree (as text or JSON), or the
      canonically formatted source.
    - Output to console or file.
    - List the macros saved in a directory.
    - Load settings from a JSON configuration file.

Example usage:
    macrolang clicker.macro
    macrolang -s 'loop 3 click "left" end' -m tokens
    macrolang clicker.macro -m format -o clicker.macro
    macrolang --list ~/macros
    macrolang -c macrolang.json --list

Functions:
    process_macro(source: str, is_string: bool = False, mode: str = "tree", strict: bool = False,
                  indent: int = 2, out: Optional[str] = None) -> str:
        Runs lex → parse → render and prints or writes the result.

    main(argv: Optional[list[str]] = None) -> int:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import json
import logging
import sys

from macrolang.macrolang_ast import format_tree
from macrolang.macrolang_config import ConfigError, MacroConfig
from macrolang.macrolang_format import format_macro
from macrolang.macrolang_lexer import CharacterStream, Lexer
from macrolang.macrolang_library import list_macros
from macrolang.macrolang_parser import MacroSyntaxError, Parser

logger = logging.getLogger(__name__)

MODES = ("tree", "tokens", "json", "format")


def process_macro(
    source: str,
    is_string: bool = False,
    mode: str = "tree",
    strict: bool = False,
    indent: int = 2,
    out: str | None = None,
) -> str:
    """
    Run the MACROLANG front end on one macro and render the result.

    Args:
        source (str): The macro source code or path to a macro file.
        is_string (bool): If True, treats `source` as raw code instead of a file path. Defaults to False.
        mode (str): One of 'tree', 'tokens', 'json', 'format'. Defaults to 'tree'.
        strict (bool): Parse in strict mode. Defaults to False.
        indent (int): Spaces per block level for 'format' mode. Defaults to 2.
        out (str | None): Optional path to write the output. If None, prints to stdout.

    Returns:
        str: The rendered output.

    Raises:
        ValueError: If `mode` is not one of the supported modes.
        MacroSyntaxError: If strict parsing fails.
        OSError: If the source file cannot be read or the output file written.
        UnicodeDecodeError: If the source file is not valid UTF-8.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown output mode: {mode!r}")

    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    tokens = Lexer(CharacterStream(source)).tokenize()
    logger.debug("Lexed %d tokens", len(tokens))

    # 3. Parsing and rendering
    if mode == "tokens":
        result = "\n".join(f"{tok.line}:{tok.col}\t{tok.kind}\t{tok.value!r}" for tok in tokens)
    else:
        root = Parser(tokens, strict=strict).parse()
        if mode == "json":
            result = json.dumps(root.to_dict(), indent=2)
        elif mode == "format":
            result = format_macro(root, indent=indent)
        else:
            result = format_tree(root)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(result + "\n")
        logger.debug("Wrote %s output to %s", mode, out)
    else:
        print(result)
    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="macrolang")
    parser.add_argument("source", nargs="?", help="Macro file or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default="tree",
        help="What to print (default: tree)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--strict", action="store_true", help="Fail on malformed loop/end structure"
    )
    parser.add_argument("-c", "--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument(
        "-l",
        "--list",
        nargs="?",
        const="",
        metavar="DIR",
        help="List macros in DIR (default: configured macro_dir)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the MACROLANG CLI.

    Returns 0 on success and 1 when the configuration, the macro file, or
    (in strict mode) the macro's structure is invalid.
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = MacroConfig.from_file(args.config) if args.config else MacroConfig()

        if args.list is not None:
            for name in list_macros(args.list or config.macro_dir):
                print(name)
            return 0

        if args.source is None:
            parser.error("a macro source is required unless --list is given")

        process_macro(
            source=args.source,
            is_string=args.string,
            mode=args.mode,
            strict=args.strict or config.strict,
            indent=config.indent,
            out=args.out,
        )
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        for problem in e.problems:
            print(f"  {problem}", file=sys.stderr)
        return 1
    except (MacroSyntaxError, OSError, UnicodeDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
