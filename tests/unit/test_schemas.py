"""
Unit tests for Pydantic schema validators.
"""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from onboarding.schemas.application import ApplicationRejectRequest, ApplicationUpdate
from onboarding.schemas.auth import RegisterRequest
from onboarding.schemas.document import BulkVerifyRequest, DocumentRejectRequest
from onboarding.schemas.profile import ProfileUpdate


class TestRegisterRequest:
    def test_valid(self):
        data = RegisterRequest(email="a@example.com", password="longenough", full_name="  Asha  ")
        assert data.full_name == "Asha"

    def test_invalid_email_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(email="not-an-email", password="longenough", full_name="Asha")
        assert any(e["loc"] == ("email",) for e in exc_info.value.errors())

    def test_short_password_raises(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="short", full_name="Asha")

    def test_whitespace_only_full_name_raises(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password="longenough", full_name="   ")


class TestApplicationUpdate:
    def test_changes_only_contains_sent_fields(self):
        payload = ApplicationUpdate(mobile_no="9876543210", religion=None)
        assert payload.changes() == {"mobile_no": "9876543210", "religion": None}

    def test_education_entries_are_validated(self):
        payload = ApplicationUpdate(education=[{"level": "10th", "percentage": "90"}])
        assert payload.changes()["education"] == [
            {"level": "10th", "year_of_passing": None, "percentage": "90"}
        ]

    def test_invalid_date_raises(self):
        with pytest.raises(ValidationError):
            ApplicationUpdate(date_of_birth="not-a-date")


class TestRejectRequests:
    def test_application_reason_required(self):
        with pytest.raises(ValidationError):
            ApplicationRejectRequest(reason="  ")

    def test_application_reason_is_trimmed(self):
        assert ApplicationRejectRequest(reason=" Incomplete Information ").reason == "Incomplete Information"

    def test_document_reason_required(self):
        with pytest.raises(ValidationError):
            DocumentRejectRequest(reason="")


class TestOtherSchemas:
    def test_bulk_verify_needs_at_least_one_id(self):
        with pytest.raises(ValidationError):
            BulkVerifyRequest(document_ids=[])
        assert len(BulkVerifyRequest(document_ids=[uuid.uuid4()]).document_ids) == 1

    def test_profile_update_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(full_name=" ")
