"""Loose field comparison used to decide whether a stored record needs a write."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taxosync.domain.records import FieldValue, FieldValues


def values_equal(current: FieldValue, incoming: FieldValue) -> bool:
    """Compare a stored value with an incoming one.

    ``None`` only equals ``None``: an empty string is a value. Booleans equal
    ``0``/``1`` and ``"0"``/``"1"``. A number equals a string spelling the same
    number, so ``12 == "12"`` and ``1.5 == "1.50"``. Two strings compare as
    text.
    """

    if current is None or incoming is None:
        return current is None and incoming is None
    if isinstance(current, bool) or isinstance(incoming, bool):
        left, right = _as_bool(current), _as_bool(incoming)
        return left is not None and left == right
    if isinstance(current, str) and isinstance(incoming, str):
        return current == incoming
    left_number, right_number = _as_number(current), _as_number(incoming)
    if left_number is None or right_number is None:
        return current == incoming
    return left_number == right_number


def diff_fields(current: FieldValues, incoming: FieldValues) -> dict[str, FieldValue]:
    """Return the incoming fields whose value differs from the stored one."""

    return {
        name: value
        for name, value in incoming.items()
        if not values_equal(current.get(name), value)
    }


def _as_bool(value: FieldValue) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float) and value in {0, 1}:
        return bool(value)
    if isinstance(value, str) and value.strip() in {"0", "1"}:
        return value.strip() == "1"
    return None


def _as_number(value: FieldValue) -> Decimal | None:
    if isinstance(value, int | float):
        return Decimal(str(value))
    if not isinstance(value, str):
        return None
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None
