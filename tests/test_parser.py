## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from furlow import parser
from furlow.compiler import compile_tree
from furlow.errors import FurlowParseError, FurlowIncompleteParse


def _compile(source: str) -> list[str]:
    """Helper: parse and compile, returning the operations in assembly text form."""
    return [repr(op) for op in compile_tree(parser.parse(source, filename="<test>"), filename="<test>")]


def test_expression_statement_stores_result():
    assert _compile("3+4;") == ['const 3', 'const 4', 'add', 'setx']


def test_operator_precedence_and_parentheses():
    assert _compile("1+2*3;") == ['const 1', 'const 2', 'const 3', 'mul', 'add', 'setx']
    assert _compile("(1+2)*3;") == ['const 1', 'const 2', 'add', 'const 3', 'mul', 'setx']


def test_unary_minus():
    assert _compile("-2.5 - 1;") == ['const 2.5', 'neg', 'const 1', 'sub', 'setx']


def test_declaration_with_initializer():
    assert _compile("num x = 2;") == ['num x', 'const 2', 'store x', 'load x', 'setx']


def test_scope_declaration_and_keyword_prefix_names():
    assert _compile("scope s;") == ['scope s', 'load s', 'setx']
    assert _compile("number;") == ['load number', 'setx']


def test_assignment():
    assert _compile("x = x % 3;") == ['load x', 'const 3', 'mod', 'store x', 'load x', 'setx']


def test_native_call_passes_argument_count():
    assert _compile("floor(12.75);") == ['const 12.75', 'call floor 1', 'setx']
    assert _compile("f();") == ['call f 0', 'setx']


def test_array_literal():
    assert _compile("[1, 2, 3];") == ['const 1', 'const 2', 'const 3', 'array 3', 'setx']


def test_block_compiles_each_statement():
    assert _compile("{ 1; { 2; } }") == ['const 1', 'setx', 'const 2', 'setx']


def test_empty_statement_compiles_to_nothing():
    assert _compile(";") == []
    assert _compile("  # just a comment\n") == []


def test_operations_carry_session_line_numbers():
    ops = compile_tree(parser.parse("\n\n7;", line=10), line=10)
    assert ops[0].meta['line'] == 12


def test_incomplete_input_is_reported_separately():
    with pytest.raises(FurlowIncompleteParse):
        parser.parse("3+4")


def test_bad_token_is_a_parse_error_with_session_line():
    with pytest.raises(FurlowParseError) as exc:
        parser.parse("\n\n3 +* 4;", line=5)
    assert not isinstance(exc.value, FurlowIncompleteParse)
    assert exc.value.line == 7


def test_unexpected_character_is_a_parse_error():
    with pytest.raises(FurlowParseError) as exc:
        parser.parse("3 $ 4;")
    assert not isinstance(exc.value, FurlowIncompleteParse)
    assert exc.value.token == '$'


def test_parse_error_context_highlights_line():
    context = parser.format_parse_error_context("<stdin>", 6, 3, '*', "1;\n3 +* 4;", first_line=5)
    assert 'line 6' in context
    assert '    5 |' in context and '    6 |' in context
