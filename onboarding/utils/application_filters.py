"""
In-memory filtering and sorting for the admin application list.

Rows are plain dicts carrying at least ``name``, ``email``,
``post_applied_for``, ``status`` and ``created_at``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from onboarding.models.application import ApplicationStatus
from onboarding.utils.status import STATUS_ALIASES
from onboarding.utils.timeutils import ensure_aware

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_NAME = "name"
SORT_KEYS = (SORT_NEWEST, SORT_OLDEST, SORT_NAME)

STATUS_ALL = "all"
SEARCH_FIELDS = ("name", "email", "post_applied_for")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _matches_search(row: Dict[str, Any], needle: str) -> bool:
    for field in SEARCH_FIELDS:
        value = row.get(field)
        if value and needle in str(value).lower():
            return True
    return False


def filter_applications(
    rows: Iterable[Dict[str, Any]],
    search: Optional[str] = None,
    status: Optional[str] = None,
    include_drafts: bool = False,
) -> List[Dict[str, Any]]:
    """
    Apply the admin search box and status dropdown.

    Args:
        rows: Application rows
        search: Case-insensitive substring matched against name, email and post
        status: Exact status, ``all``/None for every status; ``approved`` means ``accepted``
        include_drafts: Keep drafts even when the status filter does not ask for them

    Returns:
        Matching rows in input order
    """
    needle = (search or "").strip().lower()
    wanted = (status or STATUS_ALL).strip().lower()
    wanted = STATUS_ALIASES.get(wanted, wanted)

    result = []
    for row in rows:
        row_status = row.get("status")
        if wanted != STATUS_ALL and row_status != wanted:
            continue
        if (
            row_status == ApplicationStatus.DRAFT.value
            and wanted != ApplicationStatus.DRAFT.value
            and not include_drafts
        ):
            continue
        if needle and not _matches_search(row, needle):
            continue
        result.append(row)
    return result


def sort_applications(rows: Iterable[Dict[str, Any]], sort_by: str = SORT_NEWEST) -> List[Dict[str, Any]]:
    """
    Sort rows by ``newest``/``oldest`` creation time or case-insensitive ``name``.

    Raises:
        ValueError: For an unknown sort key
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")

    if sort_by == SORT_NAME:
        return sorted(rows, key=lambda r: (r.get("name") or "").lower())

    return sorted(
        rows,
        key=lambda r: ensure_aware(r.get("created_at")) or _EPOCH,
        reverse=sort_by == SORT_NEWEST,
    )
