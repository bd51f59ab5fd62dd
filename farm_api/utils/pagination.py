"""
Pagination helpers.

Query strings are parsed leniently: garbage falls back to the defaults and
out-of-range values are clamped instead of rejected.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from fastapi import Query

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _parse_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    # 0 is treated like a missing value
    return parsed or default


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def parse(cls, page: Optional[str] = None, limit: Optional[str] = None) -> "Pagination":
        page_num = max(1, _parse_int(page, DEFAULT_PAGE))
        limit_num = min(MAX_LIMIT, max(1, _parse_int(limit, DEFAULT_LIMIT)))
        return cls(page=page_num, limit=limit_num)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def apply(self, query):
        """Apply OFFSET/LIMIT to a SQLAlchemy query."""
        return query.offset(self.offset).limit(self.limit)


def get_pagination(
    page: Optional[str] = Query(None, description="Página (por defecto 1)"),
    limit: Optional[str] = Query(None, description="Registros por página (1-100, por defecto 10)"),
) -> Pagination:
    """Dependency reading `page` and `limit` from the query string."""
    return Pagination.parse(page, limit)


def paginated(items: Sequence[Any], total: int, pagination: Pagination) -> Dict[str, Any]:
    return {
        "data": list(items),
        "pagination": {
            "page": pagination.page,
            "limit": pagination.limit,
            "total": total,
            "totalPages": math.ceil(total / pagination.limit),
        },
    }
