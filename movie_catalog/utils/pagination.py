"""
Pagination Utilities
====================
Explicit page/limit/sortBy handling for list endpoints.

sortBy format: "field:direction" pairs separated by commas, e.g.
"totalVote:desc,title:asc". Direction defaults to asc; anything other
than "desc" is treated as asc. Every ordering ends with the primary key
so that pages never overlap or skip rows.

Usage:
    options = PageOptions(sort_by="totalVote:desc", limit=10, page=2)
    page = paginate(db.query(Movie), options, sortable=MOVIE_SORT_FIELDS,
                    default_order=[Movie.created_at.asc()], tie_breaker=Movie.id)
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Query

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageOptions:
    sort_by: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    page: int = DEFAULT_PAGE

    @classmethod
    def from_query(cls, sort_by: Optional[str], limit: Optional[int], page: Optional[int]) -> "PageOptions":
        """Fall back to defaults for missing or non-positive values"""
        limit = limit if limit and limit > 0 else DEFAULT_LIMIT
        page = page if page and page > 0 else DEFAULT_PAGE
        return cls(sort_by=sort_by or None, limit=min(limit, MAX_LIMIT), page=page)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_sort_by(sort_by: Optional[str], sortable: Dict[str, Any]) -> List[Any]:
    """
    Turn a sortBy string into ORDER BY clauses.

    Raises:
        ValueError: if a field is not in the sortable whitelist
    """
    clauses = []
    if not sort_by:
        return clauses

    for part in sort_by.split(","):
        part = part.strip()
        if not part:
            continue
        field, _, direction = part.partition(":")
        field = field.strip()
        if field not in sortable:
            raise ValueError(f"Invalid sort field. Allowed: {', '.join(sorted(sortable))}")
        column = sortable[field]
        clauses.append(column.desc() if direction.strip().lower() == "desc" else column.asc())
    return clauses


def paginate(
    query: Query,
    options: PageOptions,
    sortable: Dict[str, Any],
    default_order: List[Any],
    tie_breaker: Any,
) -> Dict[str, Any]:
    """Run a filtered query one page at a time and shape the page object"""
    order = parse_sort_by(options.sort_by, sortable) or list(default_order)
    order.append(tie_breaker.asc())

    total_results = query.order_by(None).count()
    results = query.order_by(*order).offset(options.offset).limit(options.limit).all()

    return {
        "results": results,
        "page": options.page,
        "limit": options.limit,
        "total_pages": math.ceil(total_results / options.limit),
        "total_results": total_results,
    }
