## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import functools
from typing import Sequence

import lark
from .errors import FurlowParseError, FurlowIncompleteParse


GRAMMAR = r"""start: statement*
?statement: block
          | simple? ";" -> simple_statement
block: "{" statement* "}"
?simple: declaration | assignment | expr
declaration: (NUM_KW | SCOPE_KW) NAME ("=" expr)?
assignment: NAME "=" expr

?expr: sum
?sum: product
    | sum "+" product -> add
    | sum "-" product -> sub
?product: unary
        | product "*" unary -> mul
        | product "/" unary -> div
        | product "%" unary -> mod
?unary: atom
      | "-" unary -> neg
?atom: NUMBER -> number
     | NAME -> variable
     | NAME "(" arguments? ")" -> call
     | "[" arguments? "]" -> array
     | "(" expr ")"
arguments: expr ("," expr)*

// COMMENTS
COMMENT: /#[^\r\n]*/

// TOKENS
NUM_KW: "num"
SCOPE_KW: "scope"
NUMBER: /\d+(\.\d*)?|\.\d+/
NAME: /[A-Za-z_][A-Za-z0-9_]*/

// WHITESPACE
%import common.WS
%ignore WS
%ignore COMMENT
"""


@functools.cache
def _get_parser() -> lark.Lark:
    return lark.Lark(GRAMMAR, start='start', parser="lalr", lexer="contextual", propagate_positions=True)


def session_line(n: int, line: int | Sequence[int] = 1) -> int:
    """Map line `n` of a statement to the session's input."""
    if isinstance(line, int):
        return line + n - 1
    if not line:
        return n
    return line[n-1] if 0 < n <= len(line) else line[-1] + n - len(line)


def parse(source: str, filename: str | None = None, line: int | Sequence[int] = 1) -> lark.Tree:
    """Parse one or more statements.

    `line` is where `source` starts in the session's input, or the input line of each of its lines.
    """
    try:
        tree = _get_parser().parse(source)
    except (lark.exceptions.ParseError, lark.exceptions.UnexpectedCharacters) as exc:
        def attr(k): return getattr(exc, k, None)
        token_val = getattr(token, 'value', '') if (token := attr('token')) is not None else ''
        error_class = FurlowIncompleteParse if token_val == '' and attr('char') is None else FurlowParseError
        err_line = attr('line')
        err_line = session_line(err_line if isinstance(err_line, int) and err_line > 0 else 1, line)
        raise error_class(str(exc), filename=filename, line=err_line, column=attr('column'), token=token_val or attr('char')) from None
    return tree


def format_parse_error_context(filename, line, column, token_value, source, first_line=1):
    """Show the offending statement with numbered lines and the bad token highlighted."""
    lines = source.splitlines()
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i, line_content in enumerate(lines):
        number = session_line(i + 1, first_line)
        line_color = '\033[90m'
        if number == line:
            line_color = '\033[97m'
            width = len(token_value or ' ')
            if isinstance(column, int) and 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
        result.append(f"{line_color}{number:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
