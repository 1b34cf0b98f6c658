"""
Unit tests for pagination helpers.
"""

from __future__ import annotations

import pytest

from onboarding.utils.pagination import (
    PaginationMeta,
    calculate_offset,
    calculate_total_pages,
    paginate,
)


class TestPagination:
    def test_offset(self):
        assert calculate_offset(1, 10) == 0
        assert calculate_offset(3, 10) == 20

    def test_offset_rejects_page_zero(self):
        with pytest.raises(ValueError):
            calculate_offset(0, 10)

    def test_total_pages(self):
        assert calculate_total_pages(0, 10) == 0
        assert calculate_total_pages(10, 10) == 1
        assert calculate_total_pages(11, 10) == 2

    def test_paginate_slices(self):
        items = list(range(25))
        assert paginate(items, 1, 10) == list(range(10))
        assert paginate(items, 3, 10) == [20, 21, 22, 23, 24]

    def test_page_past_the_end_is_empty(self):
        assert paginate(list(range(5)), 4, 10) == []

    def test_meta(self):
        meta = PaginationMeta.build(page=2, limit=10, total=25)
        assert meta.total_pages == 3
        assert meta.has_next is True
        assert meta.has_previous is True

        last = PaginationMeta.build(page=3, limit=10, total=25)
        assert last.has_next is False
