"""Typed comparison criteria used by prerequisite nodes.

Each criteria pairs a compare type with a qualifier and answers two
questions: does a value match, and how should the test read in an
explanation ("is Climbing", "at least 12", "at most 5 lb").

String comparisons are case-insensitive. Numeric criteria share one
compare-type enum for integers and weights.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StringCompareType(Enum):
    """How a StringCriteria qualifier is applied to a candidate string."""

    ANY = "any"
    IS = "is"
    IS_NOT = "is_not"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    STARTS_WITH = "starts_with"
    DOES_NOT_START_WITH = "does_not_start_with"
    ENDS_WITH = "ends_with"
    DOES_NOT_END_WITH = "does_not_end_with"


class NumericCompareType(Enum):
    """How a numeric qualifier is applied to a candidate value."""

    IS = "is"
    AT_LEAST = "at_least"
    AT_MOST = "at_most"


_STRING_DESCRIPTIONS: dict[StringCompareType, str] = {
    StringCompareType.ANY: "is anything",
    StringCompareType.IS: "is",
    StringCompareType.IS_NOT: "is not",
    StringCompareType.CONTAINS: "contains",
    StringCompareType.DOES_NOT_CONTAIN: "does not contain",
    StringCompareType.STARTS_WITH: "starts with",
    StringCompareType.DOES_NOT_START_WITH: "does not start with",
    StringCompareType.ENDS_WITH: "ends with",
    StringCompareType.DOES_NOT_END_WITH: "does not end with",
}

_NUMERIC_DESCRIPTIONS: dict[NumericCompareType, str] = {
    NumericCompareType.IS: "exactly",
    NumericCompareType.AT_LEAST: "at least",
    NumericCompareType.AT_MOST: "at most",
}


def _compare_strings(value: str, compare_type: StringCompareType, qualifier: str) -> bool:
    """Apply a string compare type, ignoring case."""
    value = value.lower()
    qualifier = qualifier.lower()
    if compare_type is StringCompareType.ANY:
        return True
    if compare_type is StringCompareType.IS:
        return value == qualifier
    if compare_type is StringCompareType.IS_NOT:
        return value != qualifier
    if compare_type is StringCompareType.CONTAINS:
        return qualifier in value
    if compare_type is StringCompareType.DOES_NOT_CONTAIN:
        return qualifier not in value
    if compare_type is StringCompareType.STARTS_WITH:
        return value.startswith(qualifier)
    if compare_type is StringCompareType.DOES_NOT_START_WITH:
        return not value.startswith(qualifier)
    if compare_type is StringCompareType.ENDS_WITH:
        return value.endswith(qualifier)
    if compare_type is StringCompareType.DOES_NOT_END_WITH:
        return not value.endswith(qualifier)
    return False  # pragma: no cover


def _compare_numbers(
    actual: int | float, compare_type: NumericCompareType, threshold: int | float
) -> bool:
    """Apply a numeric compare type."""
    if compare_type is NumericCompareType.IS:
        return actual == threshold
    if compare_type is NumericCompareType.AT_LEAST:
        return actual >= threshold
    if compare_type is NumericCompareType.AT_MOST:
        return actual <= threshold
    return False  # pragma: no cover


def _format_number(value: float) -> str:
    """Render a weight without a trailing ".0" for whole values."""
    return f"{value:g}"


@dataclass(slots=True)
class StringCriteria:
    """A string test, e.g. name IS "Climbing"."""

    type: StringCompareType = StringCompareType.IS
    qualifier: str = ""

    def matches(self, value: str | None) -> bool:
        return _compare_strings(value or "", self.type, self.qualifier)

    @property
    def is_anything(self) -> bool:
        """True when this criteria accepts any string at all."""
        return self.type is StringCompareType.ANY

    def __str__(self) -> str:
        description = _STRING_DESCRIPTIONS[self.type]
        if self.type is StringCompareType.ANY:
            return description
        return f"{description} {self.qualifier}"


@dataclass(slots=True)
class IntegerCriteria:
    """An integer test, e.g. level AT_LEAST 12."""

    type: NumericCompareType = NumericCompareType.AT_LEAST
    qualifier: int = 0

    def matches(self, value: int) -> bool:
        return _compare_numbers(value, self.type, self.qualifier)

    def __str__(self) -> str:
        return f"{_NUMERIC_DESCRIPTIONS[self.type]} {self.qualifier}"


@dataclass(slots=True)
class WeightCriteria:
    """A weight test in pounds, e.g. contained weight AT_MOST 5 lb."""

    type: NumericCompareType = NumericCompareType.AT_MOST
    qualifier: float = 5.0
    units: str = "lb"

    def matches(self, value: float) -> bool:
        return _compare_numbers(value, self.type, self.qualifier)

    def __str__(self) -> str:
        return (
            f"{_NUMERIC_DESCRIPTIONS[self.type]} "
            f"{_format_number(self.qualifier)} {self.units}"
        )
