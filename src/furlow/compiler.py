## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Sequence

import lark

from .types import Num, Operation
from .parser import session_line


_BINARY = ('add', 'sub', 'mul', 'div', 'mod')


def compile_tree(tree: lark.Tree, filename: str | None = None, line: int | Sequence[int] = 1) -> list[Operation]:
    """Translate parsed statements into machine operations; each statement leaves its value in `x`."""
    output: list[Operation] = []

    def meta_of(node) -> dict:
        node_meta = getattr(node, 'meta', None)
        if node_meta is None or getattr(node_meta, 'empty', True):
            return {'filename': filename, 'line': session_line(1, line)}
        return {'filename': filename, 'line': session_line(node_meta.line, line)}

    def emit(opcode, *args, node=None):
        output.append(Operation(opcode, args, meta_of(node)))

    def expression(node):
        if isinstance(node, lark.Token):
            raise NotImplementedError(f"Unexpected token `{node}` in expression.")
        match node.data:
            case 'number':
                emit('const', Num.from_string(node.children[0].value), node=node)
            case 'variable':
                emit('load', node.children[0].value, node=node)
            case 'call':
                name, *rest = node.children
                args = rest[0].children if rest else []
                for arg in args: expression(arg)
                emit('call', name.value, len(args), node=node)
            case 'array':
                items = node.children[0].children if node.children else []
                for item in items: expression(item)
                emit('array', len(items), node=node)
            case 'neg':
                expression(node.children[0])
                emit('neg', node=node)
            case op if op in _BINARY:
                lhs, rhs = node.children
                expression(lhs)
                expression(rhs)
                emit(op, node=node)
            case _:
                raise NotImplementedError(f"Unexpected `{node.data}` in expression.")

    def statement(node):
        match node.data:
            case 'block':
                for child in node.children: statement(child)
            case 'simple_statement':
                if node.children: simple(node.children[0])
            case _:
                raise NotImplementedError(f"Unexpected `{node.data}` in statement.")

    def simple(node):
        match getattr(node, 'data', None):
            case 'declaration':
                kind, name, *init = node.children
                emit(kind.value, name.value, node=node)
                if init:
                    expression(init[0])
                    emit('store', name.value, node=node)
                emit('load', name.value, node=node)
            case 'assignment':
                name, value = node.children
                expression(value)
                emit('store', name.value, node=node)
                emit('load', name.value, node=node)
            case _:
                expression(node)
        emit('setx', node=node)

    for child in tree.children:
        statement(child)
    return output
