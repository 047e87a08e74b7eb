"""Tests for loosely_equal (coercing attribute filter comparison)."""

import pytest

from warden.shared.utils.comparison import is_numeric_string, loosely_equal


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (5, 5),
        (5, "5"),
        ("5", 5),
        ("5", "5.0"),
        (" 5", 5),
        ("1e1", "10"),
        (None, ""),
        (None, 0),
        (None, False),
        (True, "web"),
        (False, "0"),
        ("web", "web"),
    ],
)
def test_loosely_equal(left, right) -> None:
    assert loosely_equal(left, right)


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (5, "6"),
        (0, "web"),
        ("web", "api"),
        ("abc", "ABC"),
        (None, "0"),
        (None, "web"),
        (True, ""),
        ("posts.edit", 1),
        (10, "1_0"),
    ],
)
def test_not_loosely_equal(left, right) -> None:
    assert not loosely_equal(left, right)


def test_is_numeric_string() -> None:
    assert is_numeric_string("42")
    assert is_numeric_string("-1.5")
    assert not is_numeric_string("nan")
    assert not is_numeric_string("inf")
    assert not is_numeric_string("web")
    assert not is_numeric_string("1_0")
