"""Pluggable version ordering used by the merge tie-break.

The default ``LexicographicComparator`` mirrors a plain ordinal string
comparison. It is known to mis-order multi-digit components (``"1.9"`` sorts
after ``"1.10"``); select ``Pep440Comparator`` via
``behavior.version_comparator: pep440`` when that matters.

A missing version always sorts before a present one.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Protocol

from packaging.version import InvalidVersion, Version


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def _ordering(value: int) -> Ordering:
    if value < 0:
        return Ordering.LESS
    if value > 0:
        return Ordering.GREATER
    return Ordering.EQUAL


class VersionComparator(Protocol):
    name: str

    def compare(self, left: str | None, right: str | None) -> Ordering: ...


def _compare_missing(left: str | None, right: str | None) -> Ordering | None:
    if left is None and right is None:
        return Ordering.EQUAL
    if left is None:
        return Ordering.LESS
    if right is None:
        return Ordering.GREATER
    return None


class LexicographicComparator:
    name = "lexicographic"

    def compare(self, left: str | None, right: str | None) -> Ordering:
        missing = _compare_missing(left, right)
        if missing is not None:
            return missing
        assert left is not None and right is not None  # nosec B101 - narrowed above
        return _ordering((left > right) - (left < right))


class Pep440Comparator:
    """Order versions with ``packaging.version``.

    Strings that are not valid PEP 440 versions (``"31.1-jre"``, ``"2.0.M1"``)
    fall back to lexicographic ordering against each other; a parseable
    version is never compared with an unparseable one, the pair falls back too.
    """

    name = "pep440"

    def __init__(self) -> None:
        self._fallback = LexicographicComparator()

    def compare(self, left: str | None, right: str | None) -> Ordering:
        missing = _compare_missing(left, right)
        if missing is not None:
            return missing
        assert left is not None and right is not None  # nosec B101 - narrowed above
        try:
            lv, rv = Version(left), Version(right)
        except InvalidVersion:
            return self._fallback.compare(left, right)
        return _ordering((lv > rv) - (lv < rv))


COMPARATORS: dict[str, type[LexicographicComparator] | type[Pep440Comparator]] = {
    LexicographicComparator.name: LexicographicComparator,
    Pep440Comparator.name: Pep440Comparator,
}

DEFAULT_COMPARATOR: VersionComparator = LexicographicComparator()


def get_comparator(name: str | None) -> VersionComparator:
    """Return a comparator by its config name; ``None`` yields the default."""
    if not name:
        return DEFAULT_COMPARATOR
    try:
        return COMPARATORS[name.strip().lower()]()
    except KeyError:
        known = ", ".join(sorted(COMPARATORS))
        raise ValueError(f"Unknown version comparator {name!r} (expected one of: {known})") from None


__all__ = [
    "Ordering",
    "VersionComparator",
    "LexicographicComparator",
    "Pep440Comparator",
    "DEFAULT_COMPARATOR",
    "get_comparator",
]
