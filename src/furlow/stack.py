## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# The typed value stack shared by the machine and native functions, and the per-call frame
# through which a native function sees it.
#

from .types import Kind, Stack, nil, kind_of
from .errors import FurlowStackUnderflow, FurlowTypeMismatch, FurlowArityMismatch, FurlowRuntimeError


class ValueStack:
    """Last-in-first-out sequence of machine values; holds references, never copies."""

    def __init__(self):
        self.top: Stack = nil
        self.depth = 0

    def push(self, value) -> None:
        kind_of(value)
        self.top = Stack(self.top, value)
        self.depth += 1

    def pop(self):
        if self.top is nil:
            raise FurlowStackUnderflow("Pop from an empty value stack.")
        self.top, head = self.top
        self.depth -= 1
        return head

    def peek(self, index: int = 0):
        """Return the value `index` places below the top without removing it."""
        stk = self.top
        for _ in range(index):
            if stk is nil: break
            stk = stk.tail
        if stk is nil:
            raise FurlowStackUnderflow(f"Value stack holds only {self.depth} item(s).")
        return stk.head

    def clear(self) -> None:
        self.top, self.depth = nil, 0

    def __len__(self):
        return self.depth

    def __repr__(self):
        return repr(self.top)


def expect(stack: ValueStack, kind: Kind | None, name: str = '?'):
    """Pop one value and check its kind; the one type-checking point of the bridge."""
    value = stack.pop()
    if kind is not None and (found := kind_of(value)) != kind:
        raise FurlowTypeMismatch(f"`{name}` expects {kind}, got {found}.", expected=kind, found=found, furlow_token=name)
    return value


class Frame:
    """View of the value stack for a single native call: check once, pop the arguments, push one result."""

    def __init__(self, stack: ValueStack, name: str, argc: int):
        self.stack = stack
        self.name = name
        self.argc = argc
        self.base = stack.depth
        self.popped = 0
        self.pushed = 0

    def check(self, inputs: tuple) -> None:
        """Validate arity and kinds against the declared inputs (push order) before anything is popped."""
        if self.argc != len(inputs):
            raise FurlowArityMismatch(f"`{self.name}` takes {len(inputs)} argument(s), but {self.argc} given.",
                                      expected=len(inputs), found=self.argc, furlow_token=self.name)
        if self.stack.depth < self.argc:
            raise FurlowStackUnderflow(f"`{self.name}` needs {self.argc} item(s) on the stack, but {self.stack.depth} available.",
                                       furlow_token=self.name)
        for i, expected in enumerate(reversed(inputs)):
            if expected is None: continue
            if (found := kind_of(self.stack.peek(i))) != expected:
                raise FurlowTypeMismatch(f"`{self.name}` expects {expected} at position {i+1} from top, got {found}.",
                                         expected=expected, found=found, furlow_token=self.name)

    def pop_typed(self, kind: Kind | None):
        if self.popped >= self.argc:
            raise FurlowStackUnderflow(f"`{self.name}` popped more than its {self.argc} argument(s).", furlow_token=self.name)
        value = expect(self.stack, kind, self.name)
        self.popped += 1
        return value

    expect = pop_typed

    def push(self, value) -> None:
        if self.pushed:
            raise FurlowRuntimeError(f"`{self.name}` may push only one result.", furlow_token=self.name)
        self.stack.push(value)
        self.pushed += 1

    def close(self) -> None:
        if self.stack.depth != self.base - self.argc + 1:
            raise FurlowRuntimeError(f"`{self.name}` left the value stack unbalanced.", furlow_token=self.name)
