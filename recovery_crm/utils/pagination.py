"""Page/per_page query parameters for list endpoints such as call logs."""

from dataclasses import dataclass

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery


FIRST_PAGE = 1
PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PaginationParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - FIRST_PAGE) * self.per_page


def get_pagination(
    page: int = Query(FIRST_PAGE, ge=FIRST_PAGE),
    per_page: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> PaginationParams:
    """Dependency reading ?page=&per_page= (10 per page unless asked otherwise)."""
    return PaginationParams(page=page, per_page=per_page)


def page_count(total: int, per_page: int) -> int:
    """Number of pages needed for total rows; 0 when there are none."""
    if per_page <= 0:
        return 0
    return -(-total // per_page)


def page_meta(total: int, pagination: PaginationParams) -> dict:
    """Fields every paginated response carries next to its items."""
    return {
        "total": total,
        "page": pagination.page,
        "per_page": pagination.per_page,
        "pages": page_count(total, pagination.per_page),
    }


def paginate_query(query: SQLAlchemyQuery, pagination: PaginationParams) -> tuple[list, int]:
    """Run query for one page. Returns (rows, total rows before paging)."""
    total = query.order_by(None).count()
    rows = query.offset(pagination.offset).limit(pagination.per_page).all()
    return rows, total
