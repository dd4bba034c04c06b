## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from .loader import get_native_name
from .library import Library


def load_builtins_library() -> Library:
    lib = Library()
    for k in dir(operators):
        if not k.startswith('op_'): continue
        lib.add_function(get_native_name(k), getattr(operators, k))
    return lib
