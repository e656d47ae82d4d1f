from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from macrolang.macrolang_ast import ASTNode
from macrolang.macrolang_lexer import Token, tokenize
from macrolang.macrolang_parser import MacroSyntaxError, Parser, UnexpectedEndOfInput, parse


def shape(node: ASTNode) -> tuple[str, str, list[Any]]:
    """Drop positions so trees can be compared by structure alone."""
    return (node.kind, node.value, [shape(c) for c in node.children])


def n(kind: str, value: str, *children: tuple[str, str, list[Any]]) -> tuple[str, str, list[Any]]:
    return (kind, value, list(children))


def root(*children: tuple[str, str, list[Any]]) -> tuple[str, str, list[Any]]:
    return n("Function", "root", *children)


def parsed(source: str, strict: bool = False) -> tuple[str, str, list[Any]]:
    return shape(parse(source, strict=strict))


token_words = st.sampled_from(
    ["loop", "end", "forever", "click", "type", "3", "007", '"a"', '"b c"', '""']
)
sources = st.lists(token_words, max_size=40).map(" ".join)


def test_empty_source() -> None:
    assert parsed("") == root()


def test_root_node() -> None:
    tree = parse("click")
    assert (tree.kind, tree.value) == ("Function", "root")


def test_arguments_are_siblings() -> None:
    assert parsed('click "left"') == root(n("Function", "click"), n("String", "left"))


def test_mouseset_numbers() -> None:
    assert parsed("mouseset 10 10") == root(
        n("Function", "mouseset"), n("Number", "10"), n("Number", "10")
    )


def test_loop_block() -> None:
    assert parsed('loop 3\ntype "hi"\nend') == root(
        n("Keyword", "loop", n("Number", "3"), n("Function", "type"), n("String", "hi"))
    )


def test_loop_block_is_followed_by_siblings() -> None:
    assert parsed("loop 2 click end keypress") == root(
        n("Keyword", "loop", n("Number", "2"), n("Function", "click")),
        n("Function", "keypress"),
    )


def test_nested_loops() -> None:
    assert parsed("loop 2 loop 3 click end type end release") == root(
        n(
            "Keyword",
            "loop",
            n("Number", "2"),
            n("Keyword", "loop", n("Number", "3"), n("Function", "click")),
            n("Function", "type"),
        ),
        n("Function", "release"),
    )


def test_forever_block_runs_to_end_of_input() -> None:
    assert parsed('forever\nclick "a"') == root(
        n("Keyword", "forever", n("Function", "click"), n("String", "a"))
    )


def test_sample_macro() -> None:
    source = """mouseset 10 10
click "left"
forever
  loop 3
    type "hello" 0.5
  end
  keypress "a"
  keyrelease "a"
"""
    assert parsed(source) == root(
        n("Function", "mouseset"),
        n("Number", "10"),
        n("Number", "10"),
        n("Function", "click"),
        n("String", "left"),
        n(
            "Keyword",
            "forever",
            n(
                "Keyword",
                "loop",
                n("Number", "3"),
                n("Function", "type"),
                n("String", "hello"),
                n("Number", "0"),
            ),
            n("Function", "keypress"),
            n("String", "a"),
            n("Function", "keyrelease"),
            n("String", "a"),
        ),
    )


def test_node_positions_follow_tokens() -> None:
    tree = parse("click\n  loop 4\n  end")
    loop = tree.children[1]
    assert (loop.line, loop.col) == (2, 3)
    assert (loop.children[0].line, loop.children[0].col) == (2, 8)
    assert (tree.line, tree.col) == (0, 0)


def test_stray_end_truncates_top_level() -> None:
    parser = Parser.from_source('click end type "x"')
    tree = parser.parse()
    assert shape(tree) == root(n("Function", "click"))
    assert parser.position == 2
    assert len(parser.tokens) == 4


def test_stray_end_strict() -> None:
    with pytest.raises(MacroSyntaxError, match="without matching 'loop'"):
        parse("click end type", strict=True)


def test_loop_as_last_token_gets_zero_count() -> None:
    assert parsed("click loop") == root(
        n("Function", "click"), n("Keyword", "loop", n("Number", "0"))
    )


def test_loop_as_last_token_strict() -> None:
    with pytest.raises(UnexpectedEndOfInput) as excinfo:
        parse("click loop", strict=True)
    assert "(line 1, col 7)" in str(excinfo.value)
    assert (excinfo.value.line, excinfo.value.col) == (1, 7)


def test_loop_without_count_does_not_consume_next_token() -> None:
    assert parsed("loop click end") == root(
        n("Keyword", "loop", n("Number", "0"), n("Function", "click"))
    )


def test_loop_without_count_strict() -> None:
    with pytest.raises(MacroSyntaxError) as excinfo:
        parse('loop "x" end', strict=True)
    assert not isinstance(excinfo.value, UnexpectedEndOfInput)


def test_unclosed_loop_runs_to_end_of_input() -> None:
    assert parsed("loop 2 click") == root(
        n("Keyword", "loop", n("Number", "2"), n("Function", "click"))
    )


def test_unclosed_loop_strict() -> None:
    with pytest.raises(UnexpectedEndOfInput, match="never closed"):
        parse("loop 2 click", strict=True)


def test_end_inside_forever_does_not_close_it() -> None:
    assert parsed("forever click end type") == root(
        n("Keyword", "forever", n("Function", "click"), n("Function", "type"))
    )


def test_end_inside_forever_strict() -> None:
    with pytest.raises(MacroSyntaxError, match="forever"):
        parse("forever click end type", strict=True)


def test_loop_inside_forever_strict_ok() -> None:
    assert parsed("forever loop 2 click end type", strict=True) == root(
        n(
            "Keyword",
            "forever",
            n("Keyword", "loop", n("Number", "2"), n("Function", "click")),
            n("Function", "type"),
        )
    )


def test_forever_inside_loop_swallows_end() -> None:
    assert parsed("loop 2 forever click end type") == root(
        n(
            "Keyword",
            "loop",
            n("Number", "2"),
            n("Keyword", "forever", n("Function", "click"), n("Function", "type")),
        )
    )


def test_parser_accepts_token_list() -> None:
    tokens = [Token("Function", "click", 1, 1), Token("String", "left", 1, 7)]
    tree = Parser(tokens).parse()
    assert tree == ASTNode(
        "Function",
        "root",
        [ASTNode("Function", "click", line=1, col=1), ASTNode("String", "left", line=1, col=7)],
    )


def test_unknown_token_kind() -> None:
    with pytest.raises(MacroSyntaxError, match="Unknown token kind"):
        Parser([Token("Operator", "+", 1, 1)]).parse()


def test_unknown_keyword() -> None:
    with pytest.raises(MacroSyntaxError, match="Unknown keyword"):
        Parser([Token("Keyword", "while", 3, 1)]).parse()


def test_macro_syntax_error_is_syntax_error() -> None:
    err = MacroSyntaxError("boom")
    assert isinstance(err, SyntaxError)
    assert str(err) == "boom"
    assert (err.line, err.col) == (0, 0)


@given(st.text())  # type: ignore[misc]
def test_lenient_parse_never_raises_on_text(source: str) -> None:
    assert parse(source).value == "root"


@given(sources)  # type: ignore[misc]
def test_lenient_parse_never_raises_on_keyword_soup(source: str) -> None:
    tree = parse(source)
    leaves: list[ASTNode] = []

    def walk(node: ASTNode) -> None:
        for child in node.children:
            if child.kind == "Keyword":
                walk(child)
            else:
                leaves.append(child)

    walk(tree)
    non_keyword = [t for t in tokenize(source) if t.kind != "Keyword"]
    # Synthesized loop counts are the only leaves without a source token.
    assert len([leaf for leaf in leaves if leaf.line]) <= len(non_keyword)


@given(sources)  # type: ignore[misc]
def test_strict_parse_agrees_with_lenient_or_raises(source: str) -> None:
    try:
        strict_tree = parse(source, strict=True)
    except MacroSyntaxError:
        return
    assert strict_tree == parse(source)


@given(sources)  # type: ignore[misc]
def test_parse_is_repeatable(source: str) -> None:
    assert parse(source) == parse(source)


def test_deeply_nested_loops_do_not_hit_recursion_limit() -> None:
    depth = 5000
    tree = parse("loop 1 " * depth)
    node = tree
    for _ in range(depth):
        assert len(node.children) in (1, 2)
        node = node.children[-1]
        assert (node.kind, node.value) == ("Keyword", "loop")
    assert [c.value for c in node.children] == ["1"]
    assert tree == parse("loop 1 " * depth)


def test_deeply_nested_unclosed_loop_strict_reports_innermost() -> None:
    with pytest.raises(UnexpectedEndOfInput) as excinfo:
        parse("loop 1\n" * 3000, strict=True)
    assert excinfo.value.line == 3000


def test_deeply_nested_closed_loops_strict() -> None:
    depth = 3000
    tree = parse("loop 2 " * depth + "click " + "end " * depth + "release", strict=True)
    assert [c.value for c in tree.children] == ["loop", "release"]
