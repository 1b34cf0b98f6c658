"""
Application status transitions.

The workflow is a fixed table rather than a configurable engine::

    draft ──submit──▶ submitted ──▶ under_review ──▶ documents_pending
                          │               │                 │
                          └───────────────┴────────┬────────┘
                                                   ▼
                                        accepted │ rejected
    accepted ──(progress reaches 100)──▶ completed

``approved`` is accepted as an input alias of ``accepted`` and never stored.
"""

from typing import Dict, FrozenSet, Optional

from onboarding.models.application import ApplicationStatus

STATUS_ALIASES: Dict[str, str] = {
    "approved": ApplicationStatus.ACCEPTED.value,
}

REVIEWABLE_STATUSES: FrozenSet[str] = frozenset({
    ApplicationStatus.SUBMITTED.value,
    ApplicationStatus.UNDER_REVIEW.value,
    ApplicationStatus.DOCUMENTS_PENDING.value,
})

TERMINAL_STATUSES: FrozenSet[str] = frozenset({
    ApplicationStatus.ACCEPTED.value,
    ApplicationStatus.REJECTED.value,
    ApplicationStatus.COMPLETED.value,
})

# Uploads are refused once an application reaches one of these
UPLOAD_LOCKED_STATUSES: FrozenSet[str] = frozenset({
    ApplicationStatus.REJECTED.value,
    ApplicationStatus.COMPLETED.value,
})

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    ApplicationStatus.DRAFT.value: frozenset({ApplicationStatus.SUBMITTED.value}),
    ApplicationStatus.SUBMITTED.value: frozenset({
        ApplicationStatus.UNDER_REVIEW.value,
        ApplicationStatus.DOCUMENTS_PENDING.value,
        ApplicationStatus.ACCEPTED.value,
        ApplicationStatus.REJECTED.value,
    }),
    ApplicationStatus.UNDER_REVIEW.value: frozenset({
        ApplicationStatus.DOCUMENTS_PENDING.value,
        ApplicationStatus.ACCEPTED.value,
        ApplicationStatus.REJECTED.value,
    }),
    ApplicationStatus.DOCUMENTS_PENDING.value: frozenset({
        ApplicationStatus.ACCEPTED.value,
        ApplicationStatus.REJECTED.value,
    }),
    ApplicationStatus.ACCEPTED.value: frozenset({ApplicationStatus.COMPLETED.value}),
    ApplicationStatus.REJECTED.value: frozenset(),
    ApplicationStatus.COMPLETED.value: frozenset(),
}

# Fields a candidate may still change per status
CONTACT_FIELDS: FrozenSet[str] = frozenset({"mobile_no", "communication_address"})


def normalize_status(value: Optional[str]) -> Optional[str]:
    """
    Map an incoming status string onto the stored vocabulary.

    Args:
        value: Raw status (any case, may be an alias)

    Returns:
        Canonical status value, or None for None

    Raises:
        ValueError: If the value is not a known status

    Example:
        >>> normalize_status("Approved")
        'accepted'
    """
    if value is None:
        return None
    key = value.strip().lower()
    key = STATUS_ALIASES.get(key, key)
    if key not in ALLOWED_TRANSITIONS:
        raise ValueError(f"Unknown application status: {value}")
    return key


def can_transition(current: str, target: str) -> bool:
    """Return True when ``current -> target`` is in the transition table."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def editable_fields(status: str) -> Optional[FrozenSet[str]]:
    """
    Applicant fields a candidate may edit in the given status.

    Returns:
        None when every field is editable (draft), otherwise the allowed set
        (possibly empty)
    """
    if status == ApplicationStatus.DRAFT.value:
        return None
    if status == ApplicationStatus.SUBMITTED.value:
        return CONTACT_FIELDS
    return frozenset()


def get_status_display(status: str) -> str:
    """Human readable label used in notifications and exports."""
    return status.replace("_", " ").title()
