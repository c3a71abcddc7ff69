"""
Search filters and pagination for Gmail list endpoints.
"""
from gfa.filters.pagination import PageCursor
from gfa.filters.query import (
    Combinator,
    FilterField,
    GmailFilter,
    QueryToken,
    SINGLE_VALUE_FIELDS,
)

__all__ = [
    "Combinator",
    "FilterField",
    "GmailFilter",
    "PageCursor",
    "QueryToken",
    "SINGLE_VALUE_FIELDS",
]
