"""JSON value kinds and the ordering used when comparing them."""

from __future__ import annotations

from enum import Enum


class ValueType(Enum):
    """The kind of value held by a JSON node."""

    NULL = 0
    OBJECT = 1
    ARRAY = 2
    STRING = 3
    BOOLEAN = 4
    NUMBER_INTEGER = 5
    NUMBER_UNSIGNED = 6
    NUMBER_FLOAT = 7
    DISCARDED = 8

    def __lt__(self, other: object) -> bool:
        """Order kinds as null < boolean < number < object < array < string.

        The three number kinds rank equal, and a discarded value is never
        smaller or larger than anything.
        """
        if not isinstance(other, ValueType):
            return NotImplemented
        left = _RANK.get(self)
        right = _RANK.get(other)
        if left is None or right is None:
            return False
        return left < right


_RANK = {
    ValueType.NULL: 0,
    ValueType.OBJECT: 3,
    ValueType.ARRAY: 4,
    ValueType.STRING: 5,
    ValueType.BOOLEAN: 1,
    ValueType.NUMBER_INTEGER: 2,
    ValueType.NUMBER_UNSIGNED: 2,
    ValueType.NUMBER_FLOAT: 2,
}