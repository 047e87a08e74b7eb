"""
Loose (coercing) equality for permission/role attribute filters.

Filters passed to PermissionCache.get_permissions compare attribute values
loosely, so a numeric string id matches an integer id:

    loosely_equal(5, "5")        -> True
    loosely_equal("1e1", "10")   -> True   (both numeric strings)
    loosely_equal(None, "")      -> True
    loosely_equal(None, 0)       -> True
    loosely_equal(True, "web")   -> True   (truthiness when a bool is involved)
    loosely_equal(0, "web")      -> False  (non-numeric string compared as text)

Callers that need strict comparison should filter the returned list themselves.
"""

from typing import Any


def is_numeric_string(value: str) -> bool:
    """Return True if value parses as a finite int or float (surrounding whitespace allowed).

    Underscore digit separators ("1_0") are not numeric here.
    """
    if "_" in value:
        return False
    try:
        number = float(value)
    except ValueError:
        return False
    return number == number and number not in (float("inf"), float("-inf"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def loosely_equal(left: Any, right: Any) -> bool:
    """Compare two attribute values with numeric-string and null coercion."""
    if left == right:
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return _truthy(left) == _truthy(right)
    if left is None or right is None:
        other = right if left is None else left
        return other == "" if isinstance(other, str) else not other
    if _is_number(left) and isinstance(right, str):
        left, right = right, left
    if isinstance(left, str) and _is_number(right):
        if is_numeric_string(left):
            return float(left) == float(right)
        return left == str(right)
    if isinstance(left, str) and isinstance(right, str):
        if is_numeric_string(left) and is_numeric_string(right):
            return float(left) == float(right)
    return False
