"""Alias codec: compact field names for the serialized permission cache.

Long record field names are renamed to single-character codes before the
entry is written to the backing store and renamed back on hydration.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from warden.core.constants import CACHE_EXCLUDED_FIELDS


class AliasCodec:
    """Field name -> alias code table for one cache population cycle.

    Codes are taken from caller-supplied alphabets; once an alphabet runs
    out, further fields keep their own name. Excluded fields are never
    aliased and never encoded.
    """

    def __init__(self, excluded: Iterable[str] = CACHE_EXCLUDED_FIELDS) -> None:
        self.aliases: dict[str, str] = {}
        self.excluded = frozenset(excluded)

    def __bool__(self) -> bool:
        return bool(self.aliases)

    def has_alias(self, field: str) -> bool:
        return field in self.aliases

    def assign_aliases(
        self, record: Mapping[str, Any], alphabet: Sequence[str]
    ) -> None:
        """Alias every new, non-excluded field of a sample record from alphabet."""
        used = set(self.aliases.values())
        codes = (code for code in alphabet if code not in used)
        for field in record:
            if field in self.aliases or field in self.excluded:
                continue
            self.aliases[field] = next(codes, field)
        self._prune_excluded()

    def reserve(self, field: str, code: str) -> None:
        """Pin field to a fixed code (e.g. the roles relation to "r")."""
        self.aliases[field] = code

    def _prune_excluded(self) -> None:
        for field in self.excluded.intersection(self.aliases):
            del self.aliases[field]

    def encode(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Drop excluded fields and rename the rest; unaliased fields keep their names."""
        return {
            self.aliases.get(field, field): value
            for field, value in record.items()
            if field not in self.excluded
        }

    def inverse(self) -> dict[str, str]:
        """Return the code -> field table stored alongside the cached records."""
        return {code: field for field, code in self.aliases.items()}

    @staticmethod
    def decode(
        encoded: Mapping[str, Any], inverse: Mapping[str, str]
    ) -> dict[str, Any]:
        """Rename codes back to field names; unknown codes pass through unchanged."""
        return {inverse.get(code, code): value for code, value in encoded.items()}
