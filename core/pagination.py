"""
Pagination defaults handed to query builders.
"""

from pydantic import BaseModel


class Pagination(BaseModel):
    """Page, page size and ordering for a list query; ranges are checked by the query layer."""

    page: int = 1
    page_size: int = 30
    order_by: str = "Id"
    group_by: str = "Id"
    ascending: bool = True


def get_default_pagination() -> Pagination:
    """Return the platform default pagination."""
    return Pagination()
