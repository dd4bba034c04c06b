## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from types import UnionType
from typing import Any, Callable, get_args

from .types import Kind, Num, NumArray, Scope, ScopeArray, Value
from .errors import FurlowTypeMissing


_KIND_OF_TYPE = {Num: Kind.NUM, NumArray: Kind.NUM, Scope: Kind.SCOPE, ScopeArray: Kind.SCOPE}


def get_python_name(native_name: str) -> str:
    """Map a built-in name to its Python function name."""
    return 'op_' + native_name


def get_native_name(py_name: str) -> str:
    """Inverse of `get_python_name`."""
    if not py_name.startswith("op_"):
        raise FurlowTypeMissing(f"Native function `{py_name}` requires prefix `op_` by convention.", furlow_token=py_name)
    return py_name[3:]


def _kind_of_annotation(tp, op_name: str) -> Kind | None:
    if tp is Any or tp == Value: return None
    if isinstance(tp, UnionType):
        kinds = {_kind_of_annotation(t, op_name) for t in get_args(tp)}
        return kinds.pop() if len(kinds) == 1 else None
    if tp in _KIND_OF_TYPE: return _KIND_OF_TYPE[tp]
    raise FurlowTypeMissing(f"Operation `{op_name}` uses `{tp}`, which is not a machine value type.", furlow_token=op_name)


def get_signature(*, fn: Callable, name: str = None) -> dict:
    """Read the annotations of a native function into its calling convention.

    Inputs are listed in push order, so the last one is on top of the stack when the call starts.
    A kind of `None` accepts any value.  Every native function returns exactly one value.
    """
    sig = inspect.signature(fn)
    op_name = name or getattr(fn, '__name__', '<unnamed>')
    params = list(sig.parameters.values())

    if any(p.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD) for p in params):
        raise FurlowTypeMissing(f"Operation `{op_name}` must take a fixed number of positional parameters.", furlow_token=op_name)

    missing_inputs = [p.name for p in params if p.annotation is inspect.Parameter.empty]
    if missing_inputs:
        missing = ', '.join(missing_inputs)
        raise FurlowTypeMissing(f"Operation `{op_name}` must annotate parameters: {missing}.", furlow_token=op_name)

    ret_ann = sig.return_annotation
    if ret_ann is inspect.Signature.empty or ret_ann is None or ret_ann is type(None):
        raise FurlowTypeMissing(f"Operation `{op_name}` must declare the type of its single result.", furlow_token=op_name)

    return {
        'arity': len(params),
        'inputs': tuple(_kind_of_annotation(p.annotation, op_name) for p in params),
        'output': _kind_of_annotation(ret_ann, op_name),
    }
