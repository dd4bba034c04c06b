## furlow — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from furlow.types import Kind, Num, NumArray, Scope, ScopeArray, Unset, kind_of, unset, nil, Stack
from furlow.errors import FurlowValueError, FurlowZeroDivision


def test_num_from_string_keeps_scale():
    assert Num.from_string("-12.340") == Num(-12340, 3)
    assert Num.from_string("7") == Num(7, 0)
    assert Num.from_string(".5") == Num(5, 1)


@pytest.mark.parametrize("text", ["", "-", "1.2.3", "abc", "1e5"])
def test_num_from_string_rejects_garbage(text):
    with pytest.raises(FurlowValueError):
        Num.from_string(text)


def test_num_rendering():
    assert str(Num(1234, 2)) == "12.34"
    assert str(Num(-5, 3)) == "-0.005"
    assert str(Num(42)) == "42"


def test_negative_precision_is_rejected():
    with pytest.raises(FurlowValueError):
        Num(1, -1)


def test_floor_divides_by_base_until_scale_is_zero():
    assert Num(123456, 3).floor() == Num(123, 0)
    assert Num(-1999, 3).floor() == Num(-1, 0)
    assert Num(5).floor() == Num(5)


def test_arithmetic_aligns_precision():
    assert Num.from_string("1.5") + Num(2) == Num(35, 1)
    assert Num(2) - Num.from_string("0.25") == Num(175, 2)
    assert Num.from_string("1.5") * Num.from_string("1.5") == Num(225, 2)


def test_division_truncates_at_the_larger_precision():
    assert Num(7) / Num(2) == Num(3)
    assert Num.from_string("7.0") / Num(2) == Num(35, 1)
    assert Num(1) / Num.from_string("0.5") == Num(20, 1)
    assert Num(-7) / Num(2) == Num(-3)


def test_modulo_follows_the_dividend_sign():
    assert Num(7) % Num(3) == Num(1)
    assert Num(-7) % Num(2) == Num(-1)


def test_division_by_zero_is_fatal():
    with pytest.raises(FurlowZeroDivision):
        Num(1) / Num(0)
    with pytest.raises(FurlowZeroDivision):
        Num(1) % Num(0, 2)


def test_int_truncates_toward_zero():
    assert int(Num(-199, 2)) == -1
    assert int(Num(655, 1)) == 65


def test_unset_is_a_singleton():
    assert Unset() is unset
    assert not unset


def test_kind_of_each_variant():
    assert kind_of(Num(1)) is Kind.NUM
    assert kind_of(NumArray((Num(1),))) is Kind.NUM
    assert kind_of(Scope("s")) is Kind.SCOPE
    assert kind_of(ScopeArray((Scope("s"),))) is Kind.SCOPE
    assert kind_of(unset) is Kind.UNSET
    with pytest.raises(FurlowValueError):
        kind_of(3)


def test_scope_lookup_of_missing_name_is_unset():
    scope = Scope("main")
    scope.define("x", Num(1))
    assert scope.lookup("x") == Num(1)
    assert scope.lookup("y") is unset


def test_stack_nil_is_canonical():
    assert Stack(nil, 1).tail is nil
    with pytest.raises(ValueError):
        Stack(None, None)
