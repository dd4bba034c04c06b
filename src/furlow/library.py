## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import Kind, Scope, kind_of, unset
from .stack import Frame, ValueStack
from .errors import FurlowNameError, FurlowTypeMismatch
from .loader import get_signature


@dataclass(frozen=True)
class NativeFunction:
    """Registration record for a built-in: its name, the Python callable and its declared kinds."""
    name: str
    fn: Callable[..., Any]
    inputs: tuple[Kind | None, ...]
    output: Kind | None

    @property
    def arity(self) -> int:
        return len(self.inputs)

    def __call__(self, stack: ValueStack, argc: int) -> None:
        frame = Frame(stack, self.name, argc)
        frame.check(self.inputs)
        args = [frame.expect(kind) for kind in reversed(self.inputs)]
        result = self.fn(*reversed(args))
        if self.output is not None and (found := kind_of(result)) != self.output:
            raise FurlowTypeMismatch(f"`{self.name}` declares a {self.output} result, but returned {found}.",
                                     expected=self.output, found=found, furlow_token=self.name)
        frame.push(result)
        frame.close()


@dataclass
class Library:
    functions: dict[str, NativeFunction] = field(default_factory=dict)

    def add_function(self, name: str, fn: Callable[..., Any]) -> NativeFunction:
        meta = get_signature(fn=fn, name=name)
        native = NativeFunction(name, fn, meta['inputs'], meta['output'])
        self.functions[name] = native
        return native

    def get_function(self, name: str) -> NativeFunction:
        if (function := self.functions.get(name)) is not None:
            return function
        raise FurlowNameError(f"Native function `{name}` not found in library.", furlow_token=name)

    def install(self, namespace: Scope, names=None) -> None:
        """Bind each native function in the namespace as a scope that interpreted code can call."""
        for name in (self.functions if names is None else names):
            if namespace.lookup(name) is not unset:
                raise FurlowNameError(f"Name `{name}` is already bound in `{namespace.name}`.", furlow_token=name)
            namespace.define(name, Scope(name, native=self.get_function(name)))
