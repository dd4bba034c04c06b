## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import operator

from .types import Kind, Num, NumArray, Operation, Scope, ScopeArray, kind_of, unset
from .stack import ValueStack, expect
from .errors import FurlowNameError, FurlowTypeMismatch, FurlowRuntimeError
from .library import Library
from .formatting import format_value, show_program_and_stack, stack_to_list


_ARITHMETIC = {
    'add': operator.add, 'sub': operator.sub, 'mul': operator.mul,
    'div': operator.truediv, 'mod': operator.mod,
}


class Machine:
    """Executes operations against the shared value stack; register `x` holds the last statement's value."""

    def __init__(self, library: Library, verbosity: int = 0):
        self.library = library
        self.verbosity = verbosity
        self.program: list[Operation] = []
        self.ip = 0
        self.x = unset
        self.stack = ValueStack()
        self.globals = Scope('main')
        library.install(self.globals)

    def load(self, operations: list[Operation]) -> None:
        self.program.extend(operations)

    def registers(self) -> dict:
        return {'ip': self.ip, 'sp': self.stack.depth, 'x': self.x}

    def _lookup(self, name: str):
        if (value := self.globals.lookup(name)) is unset:
            raise FurlowNameError(f"Name `{name}` is not defined.", furlow_token=name)
        return value

    def _store(self, name: str, value) -> None:
        old = self._lookup(name)
        if (want := kind_of(old)) != (got := kind_of(value)):
            raise FurlowTypeMismatch(f"Cannot store {got} into {want} variable `{name}`.", expected=want, found=got, furlow_token=name)
        self.globals.define(name, value)

    def _array(self, count: int):
        items = tuple(reversed([self.stack.pop() for _ in range(count)]))
        kinds = [kind_of(i) for i in items]
        expected = Kind.SCOPE if kinds[:1] == [Kind.SCOPE] else Kind.NUM
        if (found := next((k for k in kinds if k != expected), None)) is not None:
            raise FurlowTypeMismatch(f"Array items must all be {expected}, got {', '.join(map(str, kinds))}.",
                                     expected=expected, found=found, furlow_token='array')
        return ScopeArray(items) if expected is Kind.SCOPE else NumArray(items)

    def _call(self, name: str, argc: int) -> None:
        target = self._lookup(name)
        if not isinstance(target, Scope) or target.native is None:
            raise FurlowTypeMismatch(f"`{name}` is not a callable function.", expected='function', found=kind_of(target), furlow_token=name)
        target.native(self.stack, argc)

    def step(self) -> None:
        op = self.program[self.ip]
        self.ip += 1
        match op.opcode:
            case 'const':
                self.stack.push(op.args[0])
            case 'load':
                self.stack.push(self._lookup(op.args[0]))
            case 'store':
                self._store(op.args[0], self.stack.pop())
            case 'num':
                self.globals.define(op.args[0], Num(0))
            case 'scope':
                self.globals.define(op.args[0], Scope(op.args[0], code=self.ip - 1))
            case 'add' | 'sub' | 'mul' | 'div' | 'mod':
                rhs, lhs = expect(self.stack, Kind.NUM, op.opcode), expect(self.stack, Kind.NUM, op.opcode)
                if isinstance(lhs, NumArray) or isinstance(rhs, NumArray):
                    raise FurlowTypeMismatch(f"`{op.opcode}` works on scalars only.", expected=Kind.NUM, found='array', furlow_token=op.opcode)
                self.stack.push(_ARITHMETIC[op.opcode](lhs, rhs))
            case 'neg':
                value = expect(self.stack, Kind.NUM, op.opcode)
                if isinstance(value, NumArray):
                    raise FurlowTypeMismatch("`neg` works on scalars only.", expected=Kind.NUM, found='array', furlow_token='neg')
                self.stack.push(-value)
            case 'array':
                self.stack.push(self._array(op.args[0]))
            case 'call':
                self._call(*op.args)
            case 'setx':
                self.x = self.stack.pop()
            case 'pop':
                self.stack.pop()
            case 'nop':
                pass
            case _:
                raise FurlowRuntimeError(f"Unknown operation `{op.opcode}`.", furlow_token=op.opcode)

    def run(self) -> None:
        while self.ip < len(self.program):
            op = self.program[self.ip]
            if self.verbosity == 2 or (self.verbosity == 1 and op.opcode == 'call'):
                show_program_and_stack(self.ip, op, self.stack.top)
            try:
                self.step()
            except Exception as exc:
                exc.furlow_op = op
                exc.furlow_token = getattr(exc, 'furlow_token', None) or op.name
                raise

    def abandon(self) -> None:
        """Drop the remainder of the loaded program and any values left on the stack."""
        self.stack.clear()
        self.ip = len(self.program)

    def print_registers(self, file=None) -> None:
        for name, value in self.registers().items():
            print(f"  {name:<3} = {format_value(value) if name == 'x' else value}", file=file)

    def print_state(self, file=None) -> None:
        print(f"  program : {len(self.program)} operation(s), ip = {self.ip}", file=file)
        items = stack_to_list(self.stack.top)
        print(f"  stack   : {' '.join(format_value(v) for v in reversed(items)) or '∅'}", file=file)
        for name, value in self.globals.variables.items():
            print(f"  {name:<7} = {format_value(value)}", file=file)
