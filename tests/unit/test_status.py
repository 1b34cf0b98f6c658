"""
Unit tests for the application status table and edit rules.
"""

from __future__ import annotations

import pytest

from onboarding.models.application import ApplicationStatus
from onboarding.utils.status import (
    CONTACT_FIELDS,
    can_transition,
    editable_fields,
    get_status_display,
    normalize_status,
)


class TestNormalizeStatus:
    def test_approved_is_alias_of_accepted(self):
        assert normalize_status("approved") == "accepted"
        assert normalize_status("Approved") == "accepted"

    def test_known_status_passes_through(self):
        assert normalize_status(" UNDER_REVIEW ") == "under_review"

    def test_none_stays_none(self):
        assert normalize_status(None) is None

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError):
            normalize_status("archived")


class TestCanTransition:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("draft", "submitted"),
            ("submitted", "under_review"),
            ("submitted", "accepted"),
            ("under_review", "documents_pending"),
            ("under_review", "rejected"),
            ("documents_pending", "accepted"),
            ("accepted", "completed"),
        ],
    )
    def test_allowed_moves(self, current, target):
        assert can_transition(current, target) is True

    @pytest.mark.parametrize(
        "current,target",
        [
            ("draft", "accepted"),
            ("draft", "under_review"),
            ("rejected", "accepted"),
            ("completed", "accepted"),
            ("accepted", "rejected"),
            ("submitted", "draft"),
        ],
    )
    def test_refused_moves(self, current, target):
        assert can_transition(current, target) is False

    def test_every_status_has_a_row(self):
        for s in ApplicationStatus:
            # Must not raise for any stored status
            can_transition(s.value, ApplicationStatus.COMPLETED.value)


class TestEditableFields:
    def test_draft_allows_everything(self):
        assert editable_fields("draft") is None

    def test_submitted_allows_contact_fields_only(self):
        assert editable_fields("submitted") == CONTACT_FIELDS
        assert "mobile_no" in CONTACT_FIELDS
        assert "name" not in CONTACT_FIELDS

    def test_later_statuses_allow_nothing(self):
        for s in ("under_review", "accepted", "rejected", "completed"):
            assert editable_fields(s) == frozenset()


def test_status_display():
    assert get_status_display("under_review") == "Under Review"
    assert get_status_display("accepted") == "Accepted"
