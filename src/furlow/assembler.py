## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Raw mode: one line of text is one machine operation, written the way `repr(Operation)` prints it.
#

from .types import Num, Operation
from .errors import FurlowAssemblyError, FurlowValueError


def _count(text: str) -> int:
    if not text.isdigit():
        raise FurlowAssemblyError(f"Expected a non-negative count, got `{text}`.", furlow_token=text)
    return int(text)

def _number(text: str) -> Num:
    try:
        return Num.from_string(text)
    except FurlowValueError as exc:
        raise FurlowAssemblyError(str(exc), furlow_token=text) from None

def _name(text: str) -> str:
    if not (text[0].isalpha() or text[0] == '_') or not all(c.isalnum() or c == '_' for c in text):
        raise FurlowAssemblyError(f"Invalid name `{text}`.", furlow_token=text)
    return text


OPCODES = {
    'const': (_number,),
    'load': (_name,), 'store': (_name,),
    'num': (_name,), 'scope': (_name,),
    'add': (), 'sub': (), 'mul': (), 'div': (), 'mod': (), 'neg': (),
    'array': (_count,),
    'call': (_name, _count),
    'setx': (), 'pop': (), 'nop': (),
}


def assemble(line: str, address: int | None = None) -> Operation | None:
    """Assemble one line; blank lines and `#` comments produce nothing."""
    words = line.split('#', 1)[0].split()
    if not words:
        return None
    opcode, *operands = words
    if (parsers := OPCODES.get(opcode)) is None:
        raise FurlowAssemblyError(f"Unknown instruction `{opcode}`.", furlow_token=opcode)
    if len(operands) != len(parsers):
        raise FurlowAssemblyError(f"`{opcode}` takes {len(parsers)} operand(s), but {len(operands)} given.", furlow_token=opcode)
    args = tuple(parse(text) for parse, text in zip(parsers, operands))
    return Operation(opcode, args, {'filename': '<raw>', 'address': address})
