"""Store-level filter and sort specifications.

A filter is a sequence of clauses that are ANDed together. Each clause is
either a single ``Condition`` or an ``AnyOf`` group whose conditions are ORed.
The same objects are compiled to SQL by ``db_client`` and evaluated directly
against documents by ``matches``.
"""

from dataclasses import dataclass
from typing import Any


EQUALS = "="
NOT_EQUALS = "!="
CONTAINS = "~"

OPERATORS = (EQUALS, NOT_EQUALS, CONTAINS)


def contains_casefold(haystack: Any, needle: Any) -> bool:
    """Case-insensitive substring test; a missing value contains nothing."""
    if haystack is None or needle is None:
        return False
    return str(needle).casefold() in str(haystack).casefold()


@dataclass(frozen=True)
class Condition:
    """Compare one document field against a value."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            msg = f"Unsupported operator: {self.op}"
            raise ValueError(msg)

    def matches(self, document: dict[str, Any]) -> bool:
        actual = document.get(self.field)
        if self.op == EQUALS:
            return actual == self.value
        if self.op == NOT_EQUALS:
            return actual != self.value
        return contains_casefold(actual, self.value)


@dataclass(frozen=True)
class AnyOf:
    """Match when at least one of the conditions matches."""

    conditions: tuple[Condition, ...]

    def matches(self, document: dict[str, Any]) -> bool:
        return any(condition.matches(document) for condition in self.conditions)


Clause = Condition | AnyOf


@dataclass(frozen=True)
class SortSpec:
    """Single-field ordering."""

    field: str
    descending: bool = True


def matches_all(filters: tuple[Clause, ...] | list[Clause], document: dict[str, Any]) -> bool:
    """Return True if the document satisfies every clause."""
    return all(clause.matches(document) for clause in filters)
