"""
Unit tests for CSV exports.
"""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone

from onboarding.utils.csv_export import (
    APPLICATION_CSV_HEADER,
    REPORT_CSV_HEADER,
    applications_to_csv,
    processing_days,
    report_to_csv,
)


def _rows():
    return [
        {
            "name": "Asha Verma",
            "email": "asha@example.com",
            "post_applied_for": "Clerk",
            "status": "submitted",
            "submitted_at": datetime(2026, 9, 3, 10, 0, tzinfo=timezone.utc),
        },
        {
            "name": "Ravi Kumar",
            "email": "ravi@example.com",
            "post_applied_for": "Accountant",
            "status": "accepted",
            "submitted_at": datetime(2026, 9, 5, tzinfo=timezone.utc),
        },
        {
            "name": "Meera",
            "email": "meera@example.com",
            "post_applied_for": None,
            "status": "draft",
            "submitted_at": None,
        },
    ]


class TestApplicationsToCsv:
    def test_three_rows_give_header_plus_three_lines(self):
        content = applications_to_csv(_rows())
        lines = content.strip("\n").split("\n")
        assert len(lines) == 4
        assert lines[0] == ",".join(APPLICATION_CSV_HEADER)
        assert lines[1] == "Asha Verma,asha@example.com,Clerk,submitted,2026-09-03"

    def test_missing_submission_date_is_na(self):
        content = applications_to_csv(_rows())
        assert content.strip("\n").split("\n")[3] == "Meera,meera@example.com,,draft,N/A"

    def test_commas_and_quotes_are_quoted(self):
        rows = [{
            "name": 'Verma, Asha "AV"',
            "email": "asha@example.com",
            "post_applied_for": "Clerk",
            "status": "submitted",
            "submitted_at": None,
        }]
        content = applications_to_csv(rows)
        parsed = list(csv.reader(io.StringIO(content)))
        assert parsed[1][0] == 'Verma, Asha "AV"'
        assert len(parsed[1]) == len(APPLICATION_CSV_HEADER)

    def test_empty_list_is_header_only(self):
        assert applications_to_csv([]) == ",".join(APPLICATION_CSV_HEADER) + "\n"


class TestReportCsv:
    def test_processing_days(self):
        row = {
            "submitted_at": datetime(2026, 9, 1, tzinfo=timezone.utc),
            "reviewed_at": datetime(2026, 9, 4, 6, 0, tzinfo=timezone.utc),
        }
        assert processing_days(row) == 3

    def test_processing_days_undecided(self):
        assert processing_days({"submitted_at": datetime(2026, 9, 1), "reviewed_at": None}) is None

    def test_report_rows(self):
        rows = [{
            "name": "Asha Verma",
            "email": "asha@example.com",
            "post_applied_for": "Clerk",
            "status": "accepted",
            "created_at": datetime(2026, 8, 30, tzinfo=timezone.utc),
            "submitted_at": datetime(2026, 9, 1, tzinfo=timezone.utc),
            "reviewed_at": datetime(2026, 9, 3, tzinfo=timezone.utc),
        }]
        parsed = list(csv.reader(io.StringIO(report_to_csv(rows))))
        assert parsed[0] == REPORT_CSV_HEADER
        assert parsed[1] == [
            "2026-08-30", "Asha Verma", "asha@example.com", "Clerk",
            "accepted", "2026-09-01", "2",
        ]
