## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Num, NumArray, Scope, ScopeArray, Stack, nil, unset


def stack_to_list(stk: Stack) -> list:
    """Items of a linked stack, top first."""
    result = []
    while stk is not nil:
        stk, head = stk
        result.append(head)
    return result


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_value(it) -> str:
    """Render a machine value: arrays as a bracketed listing, scopes as a structural summary."""
    if isinstance(it, (NumArray, ScopeArray)):
        return '[ ' + ', '.join(format_value(i) for i in it.items) + ' ]'
    if isinstance(it, Scope):
        return f"{{ name = '{it.name}' , code = {it.code} }}"
    if isinstance(it, Num):
        return str(it)
    if it is unset:
        return 'unset'
    return str(it)


def show_stack(stack: Stack, width=48, end='\n', file=None):
    if stack is nil:
        stack_str = '∅'
    else:
        stack_str = ' '.join(format_value(s) for s in reversed(stack_to_list(stack)))
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)


def show_program_and_stack(ip: int, op, stack: Stack, file=None):
    show_stack(stack, end='', file=file)
    print(f" \033[36m <=> \033[0m \033[90m{ip:>4} :\033[0m {op!r}", file=file)
