"""
Owner-scoped todo query building.
Turns raw query-string values into repository criteria, ordering and paging.
The parsing is deliberately forgiving: odd input narrows nothing rather than failing.
"""

import re
from dataclasses import dataclass, field

from todo_api.db.repositories.base_repository import ASCENDING, DESCENDING, INT64_MAX, SortSpec
from todo_api.schemas.todo import TodoQueryParams

# Leading optional whitespace, sign and digits; anything after the digits is ignored ("10abc" -> 10)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class TodoQuery:
    criteria: dict
    sort: SortSpec = field(default_factory=list)
    limit: int | None = None
    skip: int | None = None


def build_filter(owner_id: int, params: TodoQueryParams) -> dict:
    """
    Criteria for a list request. owner_id is always present and always the resolved owner.
    completed narrows only when sent non-empty; only the literal "true" means True.
    """
    criteria = {}
    if params.completed:
        criteria["completed"] = params.completed == "true"
    criteria["owner_id"] = owner_id
    return criteria


def build_sort(sort_by: str | None) -> list[tuple[str, int]]:
    """Parse "field:direction". Anything but "desc" sorts ascending; field names are not checked."""
    if not sort_by:
        return []
    parts = sort_by.split(":")
    name = parts[0]
    if not name:
        return []
    direction = parts[1] if len(parts) > 1 else None
    return [(name, DESCENDING if direction == "desc" else ASCENDING)]


def _parse_count(raw: str | None) -> int | None:
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    value = int(match.group(1))
    if value < 0:
        return None
    # Anything past the driver's range already means "all of them" / "past the end"
    return min(value, INT64_MAX)


def build_pagination(limit: str | None, skip: str | None) -> tuple[int | None, int | None]:
    """(limit, skip); None means unbounded / from the start. "0" stays 0, huge values are capped."""
    return _parse_count(limit), _parse_count(skip)


def build_query(owner_id: int, params: TodoQueryParams) -> TodoQuery:
    limit, skip = build_pagination(params.limit, params.skip)
    return TodoQuery(
        criteria=build_filter(owner_id, params),
        sort=build_sort(params.sort_by),
        limit=limit,
        skip=skip,
    )
