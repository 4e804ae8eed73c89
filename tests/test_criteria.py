"""Tests for string, integer, and weight criteria."""

import pytest

from gurps_prereqs.models.criteria import (
    IntegerCriteria,
    NumericCompareType,
    StringCompareType,
    StringCriteria,
    WeightCriteria,
)


S = StringCompareType
N = NumericCompareType


class TestStringCriteria:
    @pytest.mark.parametrize(
        "compare, qualifier, value, expected",
        [
            (S.ANY, "", "anything at all", True),
            (S.IS, "Climbing", "climbing", True),
            (S.IS, "Climbing", "Climbing Gear", False),
            (S.IS_NOT, "Climbing", "Swimming", True),
            (S.CONTAINS, "weapon", "Weapon Master", True),
            (S.DOES_NOT_CONTAIN, "weapon", "Weapon Master", False),
            (S.STARTS_WITH, "fire", "Fireball", True),
            (S.DOES_NOT_START_WITH, "fire", "Ignite Fire", True),
            (S.ENDS_WITH, "FIRE", "Ignite Fire", True),
            (S.DOES_NOT_END_WITH, "fire", "Fireball", True),
        ],
    )
    def test_matches(self, compare, qualifier, value, expected):
        assert StringCriteria(compare, qualifier).matches(value) is expected

    def test_none_value_treated_as_empty(self):
        assert StringCriteria(S.IS, "").matches(None)
        assert not StringCriteria(S.IS, "x").matches(None)

    def test_describe(self):
        assert str(StringCriteria(S.IS, "Climbing")) == "is Climbing"
        assert str(StringCriteria(S.DOES_NOT_START_WITH, "Fire")) == "does not start with Fire"

    def test_describe_any_omits_qualifier(self):
        assert str(StringCriteria(S.ANY, "ignored")) == "is anything"

    def test_is_anything(self):
        assert StringCriteria(S.ANY).is_anything
        assert not StringCriteria(S.IS).is_anything


class TestIntegerCriteria:
    def test_at_least(self):
        c = IntegerCriteria(N.AT_LEAST, 12)
        assert c.matches(12)
        assert c.matches(14)
        assert not c.matches(11)

    def test_at_most(self):
        c = IntegerCriteria(N.AT_MOST, 3)
        assert c.matches(3)
        assert not c.matches(4)

    def test_is(self):
        c = IntegerCriteria(N.IS, 8)
        assert c.matches(8)
        assert not c.matches(7)

    def test_describe(self):
        assert str(IntegerCriteria(N.AT_LEAST, 15)) == "at least 15"
        assert str(IntegerCriteria(N.AT_MOST, 2)) == "at most 2"
        assert str(IntegerCriteria(N.IS, 8)) == "exactly 8"

    def test_defaults(self):
        c = IntegerCriteria()
        assert c.type is N.AT_LEAST
        assert c.qualifier == 0


class TestWeightCriteria:
    def test_matches(self):
        c = WeightCriteria(N.AT_MOST, 5.0)
        assert c.matches(5.0)
        assert c.matches(0.5)
        assert not c.matches(5.25)

    def test_describe_whole_number(self):
        assert str(WeightCriteria(N.AT_MOST, 5.0)) == "at most 5 lb"

    def test_describe_fraction(self):
        assert str(WeightCriteria(N.AT_LEAST, 2.5)) == "at least 2.5 lb"

    def test_describe_units(self):
        assert str(WeightCriteria(N.IS, 10, units="kg")) == "exactly 10 kg"
