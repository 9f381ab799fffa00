"""
Unit tests for pagination helpers.
"""

import pytest

from cashflow_mcp.core.pagination import (
    ELLIPSIS,
    offset_for,
    page_numbers,
    page_slice,
    total_pages,
)


@pytest.mark.unit
class TestTotalPages:
    """Tests for total_pages."""

    def test_rounds_up(self) -> None:
        """Test that a partial last page counts as a page."""
        assert total_pages(101, 50) == 3

    def test_exact_multiple(self) -> None:
        """Test exact multiple."""
        assert total_pages(100, 50) == 2

    def test_empty_is_one_page(self) -> None:
        """Test empty is one page."""
        assert total_pages(0, 50) == 1

    def test_invalid_page_size(self) -> None:
        """Test invalid page size."""
        with pytest.raises(ValueError, match="Page size must be positive"):
            total_pages(10, 0)


@pytest.mark.unit
class TestPageSlice:
    """Tests for page slicing."""

    def test_offset(self) -> None:
        """Test page offsets."""
        assert offset_for(1, 50) == 0
        assert offset_for(3, 50) == 100

    def test_last_partial_page(self) -> None:
        """Test last partial page."""
        items = list(range(101))
        assert page_slice(items, 3, 50) == [100]

    def test_past_the_end(self) -> None:
        """Test past the end."""
        assert page_slice(list(range(10)), 5, 10) == []


@pytest.mark.unit
class TestPageNumbers:
    """Tests for the collapsed page-number list."""

    def test_few_pages_all_shown(self) -> None:
        """Test few pages all shown."""
        assert page_numbers(1, 1) == [1]
        assert page_numbers(3, 7) == [1, 2, 3, 4, 5, 6, 7]

    def test_near_start(self) -> None:
        """Test near start."""
        assert page_numbers(1, 10) == [1, 2, 3, 4, 5, ELLIPSIS, 10]
        assert page_numbers(4, 10) == [1, 2, 3, 4, 5, ELLIPSIS, 10]

    def test_near_end(self) -> None:
        """Test near end."""
        assert page_numbers(7, 10) == [1, ELLIPSIS, 6, 7, 8, 9, 10]
        assert page_numbers(10, 10) == [1, ELLIPSIS, 6, 7, 8, 9, 10]

    def test_middle(self) -> None:
        """Test middle."""
        assert page_numbers(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]

    def test_eight_pages(self) -> None:
        """Test eight pages."""
        assert page_numbers(1, 8) == [1, 2, 3, 4, 5, ELLIPSIS, 8]
        assert page_numbers(5, 8) == [1, ELLIPSIS, 4, 5, 6, 7, 8]

    def test_first_and_last_always_present(self) -> None:
        """Test first and last always present."""
        for total in range(1, 20):
            for current in range(1, total + 1):
                pages = page_numbers(current, total)
                assert pages[0] == 1
                assert pages[-1] == total
                assert current in pages
