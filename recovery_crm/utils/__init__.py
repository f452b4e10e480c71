"""Utility modules."""

from recovery_crm.utils.money import format_inr, percentage
from recovery_crm.utils.normalization import (
    normalize_email,
    normalize_name,
    normalize_pan,
    normalize_phone,
)
from recovery_crm.utils.pagination import (
    PaginationParams,
    get_pagination,
    paginate_query,
)

__all__ = [
    # Money
    "format_inr",
    "percentage",
    # Normalization
    "normalize_email",
    "normalize_name",
    "normalize_pan",
    "normalize_phone",
    # Pagination
    "PaginationParams",
    "get_pagination",
    "paginate_query",
]
