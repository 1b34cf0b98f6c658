"""
Submission checks for candidate applications.

A draft may be saved half-filled; these rules only gate ``draft -> submitted``.
Every problem is collected so the caller can return one field -> message map.
"""

import re
from typing import Any, Dict, Mapping

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MOBILE_PATTERN = re.compile(r"^[0-9]{10}$")

REQUIRED_FIELDS: Dict[str, str] = {
    "post_applied_for": "Post applied for is required",
    "name": "Name is required",
    "father_or_husband_name": "Father's/Husband's name is required",
    "permanent_address": "Permanent address is required",
    "communication_address": "Communication address is required",
    "date_of_birth": "Date of birth is required",
    "sex": "Sex is required",
    "marital_status": "Marital status is required",
    "mobile_no": "Mobile number is required",
    "email": "Email is required",
    "bank_name": "Bank name is required",
}


def validate_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def validate_mobile(value: str) -> bool:
    """Ten digits, spaces and dashes ignored."""
    digits = re.sub(r"[\s-]", "", value or "")
    return bool(MOBILE_PATTERN.match(digits))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_submission(data: Mapping[str, Any]) -> Dict[str, str]:
    """
    Check that an application is complete enough to submit.

    Args:
        data: Application field values (model attributes merged with any
            pending updates)

    Returns:
        Field name -> error message; empty when the application may be submitted

    Example:
        >>> validate_submission({"name": "A"})["email"]
        'Email is required'
    """
    errors: Dict[str, str] = {}

    for field, message in REQUIRED_FIELDS.items():
        if _is_blank(data.get(field)):
            errors[field] = message

    email = data.get("email")
    if "email" not in errors and not validate_email(email):
        errors["email"] = "Invalid email address"

    mobile = data.get("mobile_no")
    if "mobile_no" not in errors and not validate_mobile(mobile):
        errors["mobile_no"] = "Mobile number must be 10 digits"

    if data.get("declaration_accepted") is not True:
        errors["declaration_accepted"] = "You must accept the declaration"

    return errors
