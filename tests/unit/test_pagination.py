"""
Unit tests for pagination defaults.
"""

from core.pagination import Pagination, get_default_pagination


class TestPagination:
    """Test cases for Pagination."""

    def test_default_pagination_values(self):
        """The default factory yields the documented values."""
        assert get_default_pagination().model_dump() == {
            "page": 1,
            "page_size": 30,
            "order_by": "Id",
            "group_by": "Id",
            "ascending": True,
        }

    def test_default_factory_returns_fresh_values(self):
        first = get_default_pagination()
        first.page = 4

        assert get_default_pagination().page == 1

    def test_out_of_range_values_are_not_rejected(self):
        """Range checks belong to the query layer."""
        pagination = Pagination(page=0, page_size=-5, ascending=False)

        assert pagination.page == 0
        assert pagination.page_size == -5

    def test_value_equality(self):
        assert Pagination(order_by="CreatedAt") == Pagination(order_by="CreatedAt")
