## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys

from .types import Num, NumArray
from .errors import FurlowValueError
from .formatting import format_value


def op_floor(x: Num | NumArray) -> Num | NumArray:
    """Round down by dropping all fractional digits; the argument is left untouched."""
    if isinstance(x, NumArray):
        return NumArray(tuple(op_floor(i) for i in x.items))
    return x.floor()

def op_print_n(x: Num | NumArray) -> Num:
    print(format_value(x))
    return Num(0)

def op_putchar(x: Num | NumArray) -> Num:
    if isinstance(x, NumArray):
        raise FurlowValueError("`putchar` expects a scalar number, got an array.", furlow_token='putchar')
    sys.stdout.write(chr(int(x) % 256))
    return Num(0)
