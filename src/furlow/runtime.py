## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Callable, Sequence

from .types import Operation, unset
from .parser import parse
from .compiler import compile_tree
from .assembler import assemble
from .library import Library
from .builtins import load_builtins_library
from .interpreter import Machine


class Runtime:
    """Facade over the external pipeline: parser, compiler, assembler and machine."""

    def __init__(self, library: Library | None = None, verbosity: int = 0):
        self.library = library or load_builtins_library()
        self.machine = Machine(self.library, verbosity=verbosity)

    # Loading ─────────────────────────────────────────────────────────────────────────────────
    def compile(self, source: str, filename: str | None = None, line: int | Sequence[int] = 1) -> list[Operation]:
        operations = compile_tree(parse(source, filename=filename, line=line), filename=filename, line=line)
        self.machine.load(operations)
        return operations

    def assemble(self, line: str) -> Operation | None:
        if (op := assemble(line, address=len(self.machine.program))) is not None:
            self.machine.load([op])
        return op

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self) -> None:
        self.machine.run()

    def evaluate(self, source: str, filename: str | None = None):
        """Compile and run `source`, then take the value out of the result register."""
        self.compile(source, filename=filename)
        self.run()
        return self.take_result()

    def take_result(self):
        result, self.machine.x = self.machine.x, unset
        return result

    def abandon(self) -> None:
        self.machine.abandon()

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable) -> None:
        self.library.add_function(name, func)
        self.library.install(self.machine.globals, names=[name])

    # Introspection ───────────────────────────────────────────────────────────────────────────
    @property
    def ip(self) -> int:
        return self.machine.ip

    def get_signature(self, name: str) -> dict:
        fn = self.library.get_function(name)
        return {'arity': fn.arity, 'inputs': fn.inputs, 'output': fn.output}
