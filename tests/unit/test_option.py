"""
Unit tests for Option — presence, extraction, mutation and comparison.
"""

from __future__ import annotations

import pytest

from optionkit.errors import NoneValueError
from optionkit.option import Option, equal
from optionkit.primitives import Int, Str


class TestFactories:
    """Verify the three ways to build an Option."""

    def test_some_holds_value(self) -> None:
        """
        GIVEN Option.some(5)
        WHEN presence and value are queried
        THEN it is present and holds 5.
        """
        opt = Option.some(5)
        assert opt.is_some()
        assert not opt.is_none()
        assert opt.get() == 5

    def test_none_is_absent(self) -> None:
        """
        GIVEN Option.none()
        WHEN presence is queried
        THEN it is absent and falsy.
        """
        opt: Option[int] = Option.none()
        assert opt.is_none()
        assert not opt

    def test_some_can_hold_zero_values(self) -> None:
        """
        GIVEN Some(0) and Some("")
        WHEN presence is queried
        THEN both are present (zero is not absence).
        """
        assert Option.some(0).is_some()
        assert Option.some("").is_some()

    def test_from_nullable(self) -> None:
        """
        GIVEN None and 0
        WHEN passed to from_nullable
        THEN None gives an absent Option and 0 gives Some(0).
        """
        assert Option.from_nullable(None).is_none()
        assert Option.from_nullable(0).match(0)


class TestExtraction:
    """Verify get / get_or / unwrap semantics."""

    def test_get_on_none_raises(self) -> None:
        """
        GIVEN an absent Option
        WHEN get is called
        THEN NoneValueError is raised.
        """
        with pytest.raises(NoneValueError, match="Attempted to get Option with None value"):
            Option.none().get()

    def test_get_or_returns_default_only_when_absent(self) -> None:
        """
        GIVEN an absent Option and Some(1)
        WHEN get_or(3) is called
        THEN the absent one yields 3 and the present one yields 1.
        """
        assert Option.none().get_or(3) == 3
        assert Option.some(1).get_or(3) == 1

    def test_get_or_else_calls_fallback_lazily(self) -> None:
        """
        GIVEN a fallback that records its calls
        WHEN get_or_else is used on Some and on None
        THEN the fallback runs only for None.
        """
        calls: list[int] = []

        def fallback() -> int:
            calls.append(1)
            return 9

        assert Option.some(1).get_or_else(fallback) == 1
        assert calls == []
        assert Option.none().get_or_else(fallback) == 9
        assert calls == [1]

    def test_get_or_insert_stores_default(self) -> None:
        """
        GIVEN an absent Option
        WHEN get_or_insert is called twice
        THEN the first default is stored and the second is ignored.
        """
        opt: Option[int] = Option.none()
        assert opt.get_or_insert(4) == 4
        assert opt.match(4)
        assert opt.get_or_insert(7) == 4

    def test_unwrap_clears(self) -> None:
        """
        GIVEN Some(2)
        WHEN unwrap is called
        THEN 2 is returned and the Option becomes None.
        """
        opt = Option.some(2)
        assert opt.unwrap() == 2
        assert opt.is_none()

    def test_unwrap_on_none_raises(self) -> None:
        """
        GIVEN an absent Option
        WHEN unwrap is called
        THEN NoneValueError is raised and the Option stays absent.
        """
        opt: Option[int] = Option.none()
        with pytest.raises(NoneValueError):
            opt.unwrap()
        assert opt.is_none()

    def test_unwrap_or_variants(self) -> None:
        """
        GIVEN Some(1)
        WHEN unwrap_or and unwrap_or_else are called repeatedly
        THEN the value is taken once and the fallbacks apply afterwards.
        """
        opt = Option.some(1)
        assert opt.unwrap_or(5) == 1
        assert opt.is_none()
        assert opt.unwrap_or(5) == 5
        assert opt.unwrap_or_else(lambda: 6) == 6


class TestMutation:
    """Verify set / clear / replace / default."""

    def test_set_and_clear(self) -> None:
        """
        GIVEN an absent Option
        WHEN set("x") then clear() are called
        THEN it holds "x" and then becomes absent.
        """
        opt: Option[str] = Option.none()
        opt.set("x")
        assert opt.match("x")
        opt.clear()
        assert opt.is_none()

    def test_replace_returns_previous_state(self) -> None:
        """
        GIVEN Some(1)
        WHEN replace(2) is called
        THEN the previous Some(1) is returned and the Option holds 2.
        """
        opt = Option.some(1)
        previous = opt.replace(2)
        assert previous.match(1)
        assert opt.match(2)

    def test_replace_on_none_returns_none(self) -> None:
        """
        GIVEN an absent Option
        WHEN replace(3) is called
        THEN an absent Option is returned and the Option holds 3.
        """
        opt: Option[int] = Option.none()
        assert opt.replace(3).is_none()
        assert opt.match(3)

    def test_default_only_fills_absent(self) -> None:
        """
        GIVEN an absent Option
        WHEN default is called twice
        THEN only the first call stores its value.
        """
        opt: Option[int] = Option.none()
        assert opt.default(1) is True
        assert opt.default(2) is False
        assert opt.get() == 1

    def test_clear_if_match(self) -> None:
        """
        GIVEN Some(0)
        WHEN clear_if_match is called with 1 and then with 0
        THEN only the matching call clears it.
        """
        opt = Option.some(0)
        opt.clear_if_match(1)
        assert opt.is_some()
        opt.clear_if_match(0)
        assert opt.is_none()

    def test_clone_is_independent(self) -> None:
        """
        GIVEN Some([1]) and its clone
        WHEN the clone is cleared
        THEN the original is still present.
        """
        opt = Option.some([1])
        copy = opt.clone()
        copy.clear()
        assert opt.is_some()


class TestComparison:
    """Verify match, eq and the and_/or_ combinators."""

    def test_match_on_none_is_false(self) -> None:
        """
        GIVEN an absent Option
        WHEN matched against None
        THEN the result is False.
        """
        assert Option.none().match(None) is False

    @pytest.mark.parametrize(
        ("left", "right", "expected"),
        [
            (Option.none(), Option.none(), True),
            (Option.some(1), Option.some(1), True),
            (Option.some(1), Option.some(2), False),
            (Option.some(1), Option.none(), False),
            (Option.none(), Option.some(1), False),
        ],
    )
    def test_equal(self, left: Option[int], right: Option[int], expected: bool) -> None:
        """
        GIVEN two Options
        WHEN compared with equal(), eq() and ==
        THEN all three agree on the expected result.
        """
        assert equal(left, right) is expected
        assert left.eq(right) is expected
        assert (left == right) is expected

    def test_equal_across_wrapper_types(self) -> None:
        """
        GIVEN a plain Option and a typed wrapper with the same value
        WHEN compared
        THEN they are equal (concrete types need not agree).
        """
        assert Option.some(7) == Int.some(7)
        assert Option.some("a").eq(Str.some("a"))

    def test_is_some_and(self) -> None:
        """
        GIVEN Some(4), Some(2) and None
        WHEN is_some_and(v > 3) is evaluated
        THEN only Some(4) satisfies it.
        """
        assert Option.some(4).is_some_and(lambda v: v > 3)
        assert not Option.some(2).is_some_and(lambda v: v > 3)
        assert not Option.none().is_some_and(lambda v: True)

    def test_and_or(self) -> None:
        """
        GIVEN two present Options and an absent one
        WHEN combined with and_ and or_
        THEN the combinators return the expected operand.
        """
        a = Option.some(1)
        b = Option.some(2)
        n: Option[int] = Option.none()
        assert a.and_(b) is b
        assert n.and_(b) is n
        assert a.or_(b) is a
        assert n.or_(b) is b

    def test_unhashable(self) -> None:
        """
        GIVEN a mutable Option
        WHEN hashed
        THEN TypeError is raised.
        """
        with pytest.raises(TypeError):
            hash(Option.some(1))


class TestTransformations:
    """Verify transform / transform_or / binary_transform / map."""

    def test_transform_some(self) -> None:
        """
        GIVEN Some(2)
        WHEN transformed by v * 10
        THEN it holds 20.
        """
        opt = Option.some(2)
        opt.transform(lambda v: v * 10)
        assert opt.get() == 20

    def test_transform_none_stays_none(self) -> None:
        """
        GIVEN an absent Option
        WHEN transformed
        THEN it stays absent.
        """
        opt: Option[int] = Option.none()
        opt.transform(lambda v: v * 10)
        assert opt.is_none()

    def test_transform_error_leaves_value(self) -> None:
        """
        GIVEN Some(1)
        WHEN the transform function raises
        THEN the error propagates and the value is unchanged.
        """
        opt = Option.some(1)
        with pytest.raises(ZeroDivisionError):
            opt.transform(lambda v: v // 0)
        assert opt.get() == 1

    def test_transform_or_fills_backup_first(self) -> None:
        """
        GIVEN an absent Option
        WHEN transform_or(v + 1, 10) is called
        THEN the backup is stored then transformed to 11.
        """
        opt: Option[int] = Option.none()
        opt.transform_or(lambda v: v + 1, 10)
        assert opt.get() == 11

    def test_binary_transform(self) -> None:
        """
        GIVEN Some(3) and an absent Option
        WHEN binary_transform(4, a * b) is applied to both
        THEN Some(3) becomes 12 and the absent one stays absent.
        """
        opt = Option.some(3)
        opt.binary_transform(4, lambda a, b: a * b)
        assert opt.get() == 12
        absent: Option[int] = Option.none()
        absent.binary_transform(4, lambda a, b: a * b)
        assert absent.is_none()

    def test_map_changes_type(self) -> None:
        """
        GIVEN Some(3) and None
        WHEN mapped with str
        THEN Some("3") and None are returned.
        """
        assert Option.some(3).map(str).match("3")
        assert Option.none().map(str).is_none()


class TestJsonCodec:
    """Verify null handling of the JSON codec."""

    def test_marshal(self) -> None:
        """
        GIVEN an absent Option and Some({"a": 1})
        WHEN marshalled to JSON
        THEN they encode as null and as the dict.
        """
        assert Option.none().marshal_json() == "null"
        assert Option.some({"a": 1}).marshal_json() == '{"a": 1}'

    def test_marshal_nested_options(self) -> None:
        """
        GIVEN Options that hold other option-like values
        WHEN marshalled to JSON
        THEN each inner value encodes with its own JSON form.
        """
        assert Option.some(Int.some(3)).marshal_json() == "3"
        assert Option.some(Int.none()).marshal_json() == "null"
        assert Option.some(Option.some("a")).marshal_json() == '"a"'
        assert Option.some([Option.some(1), Option.none()]).marshal_json() == "[1, null]"

    def test_marshal_unserializable_raises(self) -> None:
        """
        GIVEN Some(object())
        WHEN marshalled to JSON
        THEN TypeError is raised.
        """
        with pytest.raises(TypeError, match="not JSON serializable"):
            Option.some(object()).marshal_json()

    def test_unmarshal_null_clears(self) -> None:
        """
        GIVEN Some(1)
        WHEN "null" is unmarshalled
        THEN the Option becomes absent.
        """
        opt = Option.some(1)
        opt.unmarshal_json("null")
        assert opt.is_none()

    def test_unmarshal_value(self) -> None:
        """
        GIVEN an absent Option
        WHEN b"[1, 2]" is unmarshalled
        THEN it holds [1, 2].
        """
        opt: Option[list[int]] = Option.none()
        opt.unmarshal_json(b"[1, 2]")
        assert opt.get() == [1, 2]

    def test_unmarshal_invalid_json_raises(self) -> None:
        """
        GIVEN malformed JSON text
        WHEN unmarshalled
        THEN the json decoder's ValueError propagates.
        """
        with pytest.raises(ValueError):
            Option.none().unmarshal_json("{nope")

    def test_repr(self) -> None:
        """
        GIVEN Some("x") and None
        WHEN repr() is taken
        THEN they read Some('x') and None.
        """
        assert repr(Option.some("x")) == "Some('x')"
        assert repr(Option.none()) == "None"
