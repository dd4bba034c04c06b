## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from furlow.types import Kind, Num, Scope
from furlow.stack import ValueStack, Frame, expect
from furlow.library import Library
from furlow.errors import FurlowStackUnderflow, FurlowTypeMismatch, FurlowArityMismatch, FurlowRuntimeError


def test_push_then_expect_returns_the_same_handle():
    stack, n = ValueStack(), Num(314, 2)
    stack.push(n)
    assert expect(stack, Kind.NUM) is n
    assert stack.depth == 0


def test_expect_wrong_kind_names_the_mismatch():
    stack = ValueStack()
    stack.push(Num(1))
    with pytest.raises(FurlowTypeMismatch) as exc:
        expect(stack, Kind.SCOPE, 'probe')
    assert exc.value.expected is Kind.SCOPE
    assert exc.value.found is Kind.NUM
    assert "probe" in str(exc.value)


def test_pop_from_empty_stack_underflows():
    with pytest.raises(FurlowStackUnderflow):
        ValueStack().pop()


def test_stack_is_last_in_first_out():
    stack = ValueStack()
    for i in range(3): stack.push(Num(i))
    assert [stack.pop() for _ in range(3)] == [Num(2), Num(1), Num(0)]


def test_peek_looks_below_the_top():
    stack = ValueStack()
    stack.push(Num(1)); stack.push(Num(2))
    assert stack.peek(0) == Num(2)
    assert stack.peek(1) == Num(1)
    with pytest.raises(FurlowStackUnderflow):
        stack.peek(2)


def test_frame_checks_arity_before_popping():
    stack = ValueStack()
    stack.push(Num(1))
    frame = Frame(stack, 'f', argc=2)
    with pytest.raises(FurlowArityMismatch) as exc:
        frame.check((Kind.NUM,))
    assert (exc.value.expected, exc.value.found) == (1, 2)
    assert stack.depth == 1


def test_frame_checks_kinds_before_popping():
    stack = ValueStack()
    stack.push(Scope("s")); stack.push(Num(1))
    frame = Frame(stack, 'f', argc=2)
    with pytest.raises(FurlowTypeMismatch):
        frame.check((Kind.NUM, Kind.NUM))
    assert stack.depth == 2


def test_frame_refuses_a_second_result():
    stack = ValueStack()
    frame = Frame(stack, 'f', argc=0)
    frame.push(Num(0))
    with pytest.raises(FurlowRuntimeError):
        frame.push(Num(1))


def test_frame_refuses_to_pop_past_its_arguments():
    stack = ValueStack()
    stack.push(Num(1)); stack.push(Num(2))
    frame = Frame(stack, 'f', argc=1)
    frame.pop_typed(Kind.NUM)
    with pytest.raises(FurlowStackUnderflow):
        frame.pop_typed(Kind.NUM)


def test_native_call_leaves_exactly_one_result_above_the_callers_values():
    lib = Library()
    def op_sub(a: Num, b: Num) -> Num: return a - b
    native = lib.add_function('sub', op_sub)

    stack = ValueStack()
    below = Scope("caller")
    stack.push(below); stack.push(Num(10)); stack.push(Num(3))
    native(stack, 2)

    assert stack.depth == 2
    assert stack.pop() == Num(7)
    assert stack.pop() is below


def test_native_call_with_too_few_values_underflows():
    lib = Library()
    def op_one(a: Num) -> Num: return a
    native = lib.add_function('one', op_one)
    with pytest.raises(FurlowStackUnderflow):
        native(ValueStack(), 1)


def test_native_call_checks_the_declared_result_kind():
    lib = Library()
    def op_bad(a: Num) -> Num: return Scope("oops")
    native = lib.add_function('bad', op_bad)

    stack = ValueStack()
    stack.push(Num(1))
    with pytest.raises(FurlowTypeMismatch, match="declares a num result, but returned scope") as exc:
        native(stack, 1)
    assert (exc.value.expected, exc.value.found) == (Kind.NUM, Kind.SCOPE)
    assert stack.depth == 0


def test_frame_expect_pops_typed_arguments():
    stack = ValueStack()
    stack.push(Scope("s")); stack.push(Num(2))
    frame = Frame(stack, 'pair', 2)
    frame.check((Kind.SCOPE, Kind.NUM))
    assert frame.expect(Kind.NUM) == Num(2)
    assert frame.expect(Kind.SCOPE).name == "s"
    frame.push(Num(0))
    frame.close()
    assert stack.depth == 1
