"""
CSV rendering for admin exports.

Values go through ``csv.writer`` so commas, quotes and newlines inside a
field are quoted instead of breaking the row.
"""

import csv
import io
from typing import Any, Dict, Iterable, List, Optional

from onboarding.utils.timeutils import ensure_aware, format_date

APPLICATION_CSV_HEADER = ["Name", "Email", "Post", "Status", "Submitted Date"]
REPORT_CSV_HEADER = [
    "Date",
    "Candidate",
    "Email",
    "Post",
    "Status",
    "Submitted Date",
    "Processing Time (days)",
]


def _write(header: List[str], rows: Iterable[List[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def applications_to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    """
    Render the admin application list.

    Example:
        >>> applications_to_csv([{"name": "A", "email": "a@x.io", "post_applied_for": "Clerk",
        ...                       "status": "submitted", "submitted_at": None}])
        'Name,Email,Post,Status,Submitted Date\\nA,a@x.io,Clerk,submitted,N/A\\n'
    """
    return _write(
        APPLICATION_CSV_HEADER,
        (
            [
                row.get("name") or "",
                row.get("email") or "",
                row.get("post_applied_for") or "",
                row.get("status") or "",
                format_date(row.get("submitted_at")),
            ]
            for row in rows
        ),
    )


def processing_days(row: Dict[str, Any]) -> Optional[int]:
    """Whole days between submission and review, None while undecided."""
    submitted = ensure_aware(row.get("submitted_at"))
    reviewed = ensure_aware(row.get("reviewed_at"))
    if submitted is None or reviewed is None:
        return None
    return max((reviewed - submitted).days, 0)


def report_to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    """Render the reports page export, one row per application."""
    lines = []
    for row in rows:
        days = processing_days(row)
        lines.append([
            format_date(row.get("created_at")),
            row.get("name") or "",
            row.get("email") or "",
            row.get("post_applied_for") or "",
            row.get("status") or "",
            format_date(row.get("submitted_at")),
            "N/A" if days is None else days,
        ])
    return _write(REPORT_CSV_HEADER, lines)
