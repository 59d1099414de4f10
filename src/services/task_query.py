"""Build the store query for listing a user's tasks."""

from dataclasses import dataclass

from src.core.config import constants
from src.core.query import CONTAINS, EQUALS, AnyOf, Clause, Condition, SortSpec


@dataclass(frozen=True)
class TaskQuery:
    """Filter clauses (ANDed) and a single-field sort."""

    filters: tuple[Clause, ...]
    sort: SortSpec


def build_task_query(
    *,
    owner_id: str,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
) -> TaskQuery:
    """Translate optional list parameters into a query scoped to the owner.

    ``status`` and ``priority`` are matched exactly and are not checked against
    their enums, so an unknown value simply matches nothing. ``sort_by`` is
    passed through as-is. Any ``order`` other than ``"asc"`` sorts descending.
    """
    filters: list[Clause] = [Condition("owner", EQUALS, owner_id)]

    if status:
        filters.append(Condition("status", EQUALS, status))

    if priority:
        filters.append(Condition("priority", EQUALS, priority))

    if search:
        filters.append(
            AnyOf(
                (
                    Condition("title", CONTAINS, search),
                    Condition("description", CONTAINS, search),
                )
            )
        )

    sort = SortSpec(
        field=sort_by or constants.DEFAULT_SORT_FIELD,
        descending=(order or constants.DEFAULT_SORT_ORDER) != "asc",
    )
    return TaskQuery(filters=tuple(filters), sort=sort)
