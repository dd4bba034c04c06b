## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import enum
from collections import namedtuple
from dataclasses import dataclass, field

from .errors import FurlowValueError, FurlowZeroDivision


BASE = 10


class Kind(enum.Enum):
    UNSET = 'unset'
    NUM = 'num'
    SCOPE = 'scope'

    def __str__(self):
        return self.value


class Unset:
    """Marks an empty register or variable; there is only ever one instance, `unset`."""
    __slots__ = ()
    _singleton = None

    def __new__(cls):
        if cls._singleton is None:
            cls._singleton = super().__new__(cls)
        return cls._singleton

    def __repr__(self):
        return "unset"

    def __bool__(self):
        return False


unset = Unset()


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero, as for magnitudes with a separate sign."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


@dataclass(frozen=True)
class Num:
    """Scaled-integer decimal: `value` is the magnitude with `precision` implied fractional digits."""
    value: int = 0
    precision: int = 0

    def __post_init__(self):
        if self.precision < 0:
            raise FurlowValueError(f"Precision must not be negative, got {self.precision}.")

    @classmethod
    def from_string(cls, text: str) -> "Num":
        sign, digits = ('-', text[1:]) if text.startswith('-') else ('', text)
        whole, _, fraction = digits.partition('.')
        if not (whole or fraction) or not (whole + fraction).isdigit():
            raise FurlowValueError(f"Invalid number literal `{text}`.")
        return cls(int(sign + (whole or '0') + fraction), len(fraction))

    def rescaled(self, precision: int) -> "Num":
        if precision >= self.precision:
            return Num(self.value * BASE ** (precision - self.precision), precision)
        return Num(_tdiv(self.value, BASE ** (self.precision - precision)), precision)

    def floor(self) -> "Num":
        value, precision = self.value, self.precision
        while precision > 0:
            value = _tdiv(value, BASE)
            precision -= 1
        return Num(value, 0)

    def _aligned(self, other: "Num"):
        p = max(self.precision, other.precision)
        return self.rescaled(p).value, other.rescaled(p).value, p

    def __add__(self, other: "Num") -> "Num":
        a, b, p = self._aligned(other)
        return Num(a + b, p)

    def __sub__(self, other: "Num") -> "Num":
        a, b, p = self._aligned(other)
        return Num(a - b, p)

    def __mul__(self, other: "Num") -> "Num":
        return Num(self.value * other.value, self.precision + other.precision)

    def __truediv__(self, other: "Num") -> "Num":
        if other.value == 0:
            raise FurlowZeroDivision("Division by zero.")
        p = max(self.precision, other.precision)
        shift = other.precision + p - self.precision
        return Num(_tdiv(self.value * BASE ** shift, other.value), p)

    def __mod__(self, other: "Num") -> "Num":
        if other.value == 0:
            raise FurlowZeroDivision("Modulo by zero.")
        a, b, p = self._aligned(other)
        return Num(a - b * _tdiv(a, b), p)

    def __neg__(self) -> "Num":
        return Num(-self.value, self.precision)

    def __int__(self) -> int:
        return _tdiv(self.value, BASE ** self.precision)

    def __str__(self) -> str:
        if self.precision == 0:
            return str(self.value)
        digits = str(abs(self.value)).rjust(self.precision + 1, '0')
        sign = '-' if self.value < 0 else ''
        return f"{sign}{digits[:-self.precision]}.{digits[-self.precision:]}"


@dataclass(frozen=True)
class NumArray:
    items: tuple = ()

    def __len__(self):
        return len(self.items)


@dataclass(eq=False)
class Scope:
    """Named binding environment.  Built-in functions are scopes carrying a `native` callable."""
    name: str
    code: int = 0
    variables: dict = field(default_factory=dict)
    native: object = None

    def define(self, name: str, value) -> None:
        self.variables[name] = value

    def lookup(self, name: str):
        return self.variables.get(name, unset)

    def __repr__(self):
        return f"Scope({self.name!r}, code={self.code})"


@dataclass(frozen=True)
class ScopeArray:
    items: tuple = ()

    def __len__(self):
        return len(self.items)


Value = Num | NumArray | Scope | ScopeArray | Unset


def kind_of(value) -> Kind:
    if isinstance(value, (Num, NumArray)): return Kind.NUM
    if isinstance(value, (Scope, ScopeArray)): return Kind.SCOPE
    if value is unset: return Kind.UNSET
    raise FurlowValueError(f"Not a machine value: {value!r}")


# Linked pair used as storage for the value stack, with a canonical empty `nil`.
class Stack(namedtuple('Stack', ['tail', 'head'])):
    __slots__ = ()
    _nil_singleton = None

    def __new__(cls, tail, head):
        if tail is None and head is None:
            if cls._nil_singleton is None:
                self = super(Stack, cls).__new__(cls, tail, head)
                cls._nil_singleton = self
                return self
            raise ValueError("Use the canonical `nil` instance for empty stacks")
        return super(Stack, cls).__new__(cls, tail, head)

    def __repr__(self):
        if self is nil:
            return "< nil >"
        items = []
        current = self
        while current is not nil:
            items.append(repr(current.head))
            current = current.tail
        return "< " + " ".join(reversed(items)) + " >"

    def __bool__(self):
        raise TypeError("Stack truth value is ambiguous; compare with `is nil` or `is not nil`.")


nil = Stack(None, None)


class Operation:
    """One machine instruction; `repr` gives the same text the assembler accepts."""

    def __init__(self, opcode: str, args: tuple = (), meta: dict | None = None):
        self.opcode = opcode
        self.args = tuple(args)
        self.meta = meta or {}

    @property
    def name(self) -> str:
        if self.opcode in ('call', 'load', 'store'):
            return self.args[0]
        return self.opcode

    def __eq__(self, other):
        return isinstance(other, Operation) and self.opcode == other.opcode and self.args == other.args

    def __hash__(self):
        return hash((self.opcode, self.args))

    def __repr__(self):
        return ' '.join([self.opcode, *(str(a) for a in self.args)])
