"""Query Filters — pure parsing of DataTable list parameters.

Invariants:
    - page >= 1, 1 <= per_page <= max_per_page, sort_order in {"asc", "desc"}
    - filter is a JSON object; each value is a plain value (equality) or
      {"operator": <op>, "value": <v>} with op in OPERATORS
    - Malformed filters raise BadRequestError; bad paging values fall back to defaults

Design Decisions:
    - No SQLAlchemy here: column validation and clause building live in services/records.py,
      this module only turns raw query params into a CrudQuery
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from tradedesk.core.errors import BadRequestError

OPERATORS = frozenset({
    "equal", "notEqual", "like", "startsWith", "endsWith",
    "gt", "gte", "lt", "lte", "in", "between",
})


@dataclass(frozen=True)
class FilterClause:
    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class CrudQuery:
    page: int = 1
    per_page: int = 10
    sort_field: str = "created_at"
    sort_order: str = "desc"
    filters: tuple[FilterClause, ...] = field(default_factory=tuple)
    search: str | None = None


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def _parse_filter_clause(name: str, raw_clause: Any) -> FilterClause:
    if isinstance(raw_clause, dict) and "operator" in raw_clause:
        operator = raw_clause["operator"]
        if operator not in OPERATORS:
            raise BadRequestError(f"Unsupported filter operator '{operator}'")
        value = raw_clause.get("value")
        if operator == "in" and not isinstance(value, list):
            raise BadRequestError(f"Filter '{name}' with operator 'in' needs a list")
        if operator == "between" and (not isinstance(value, list) or len(value) != 2):
            raise BadRequestError(f"Filter '{name}' with operator 'between' needs two values")
        return FilterClause(name, operator, value)
    return FilterClause(name, "equal", raw_clause)


def parse_filters(raw: str | None) -> tuple[FilterClause, ...]:
    if not raw:
        return ()
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        raise BadRequestError("Invalid filter: not valid JSON")
    if not isinstance(decoded, dict):
        raise BadRequestError("Invalid filter: expected a JSON object")
    return tuple(
        _parse_filter_clause(name, raw_clause)
        for name, raw_clause in decoded.items()
        # An empty string means "no filter" for DataTable select boxes
        if raw_clause is not None and raw_clause != ""
    )


def parse_crud_query(
    raw: Mapping[str, Any],
    default_sort: str = "created_at",
    default_per_page: int = 10,
    max_per_page: int = 100,
) -> CrudQuery:
    page = _positive_int(raw.get("page"), 1)
    per_page = min(_positive_int(raw.get("per_page"), default_per_page), max_per_page)
    sort_order = str(raw.get("sort_order") or "desc").lower()
    if sort_order not in ("asc", "desc"):
        sort_order = "desc"
    search = raw.get("search")
    return CrudQuery(
        page=page,
        per_page=per_page,
        sort_field=raw.get("sort_field") or default_sort,
        sort_order=sort_order,
        filters=parse_filters(raw.get("filter")),
        search=search.strip() if isinstance(search, str) and search.strip() else None,
    )


def build_pagination(total: int, page: int, per_page: int) -> dict:
    return {
        "total_items": total,
        "current_page": page,
        "per_page": per_page,
        "total_pages": math.ceil(total / per_page) if per_page else 0,
    }


def offset_for(page: int, per_page: int) -> int:
    return (page - 1) * per_page
