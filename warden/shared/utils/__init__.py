"""Shared utilities: loose comparison for attribute filters."""

from warden.shared.utils.comparison import is_numeric_string, loosely_equal

__all__ = ["is_numeric_string", "loosely_equal"]
