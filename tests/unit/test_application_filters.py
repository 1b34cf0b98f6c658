"""
Unit tests for admin list filtering and sorting.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from onboarding.utils.application_filters import filter_applications, sort_applications

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _row(name, status="submitted", email=None, post="Clerk", age_days=0):
    return {
        "name": name,
        "email": email or f"{name.lower()}@example.com",
        "post_applied_for": post,
        "status": status,
        "created_at": NOW - timedelta(days=age_days),
    }


ROWS = [
    _row("Meera", status="accepted", post="Accountant", age_days=3),
    _row("arjun", status="submitted", age_days=1),
    _row("Zoya", status="rejected", age_days=2),
    _row("Dev", status="draft", age_days=0),
]


class TestFilterApplications:
    def test_all_excludes_drafts(self):
        result = filter_applications(ROWS, status="all")
        assert [r["name"] for r in result] == ["Meera", "arjun", "Zoya"]

    def test_draft_filter_shows_drafts(self):
        result = filter_applications(ROWS, status="draft")
        assert [r["name"] for r in result] == ["Dev"]

    def test_include_drafts_flag(self):
        assert len(filter_applications(ROWS, include_drafts=True)) == 4

    def test_approved_alias_matches_accepted(self):
        result = filter_applications(ROWS, status="approved")
        assert [r["name"] for r in result] == ["Meera"]

    def test_search_is_case_insensitive_over_name_email_and_post(self):
        assert [r["name"] for r in filter_applications(ROWS, search="ARJ")] == ["arjun"]
        assert [r["name"] for r in filter_applications(ROWS, search="zoya@")] == ["Zoya"]
        assert [r["name"] for r in filter_applications(ROWS, search="account")] == ["Meera"]

    def test_search_and_status_combine(self):
        assert filter_applications(ROWS, search="meera", status="rejected") == []

    def test_no_match_returns_empty(self):
        assert filter_applications(ROWS, search="nobody") == []


class TestSortApplications:
    def test_newest_first(self):
        result = sort_applications(ROWS, "newest")
        assert [r["name"] for r in result] == ["Dev", "arjun", "Zoya", "Meera"]

    def test_oldest_first(self):
        result = sort_applications(ROWS, "oldest")
        assert [r["name"] for r in result] == ["Meera", "Zoya", "arjun", "Dev"]

    def test_name_ignores_case(self):
        result = sort_applications(ROWS, "name")
        assert [r["name"] for r in result] == ["arjun", "Dev", "Meera", "Zoya"]

    def test_naive_timestamps_sort_with_aware_ones(self):
        rows = [
            {"name": "a", "created_at": datetime(2026, 1, 1)},
            {"name": "b", "created_at": datetime(2026, 1, 2, tzinfo=timezone.utc)},
            {"name": "c", "created_at": None},
        ]
        assert [r["name"] for r in sort_applications(rows, "newest")] == ["b", "a", "c"]

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError):
            sort_applications(ROWS, "status")
