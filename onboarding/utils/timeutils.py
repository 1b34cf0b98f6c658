from datetime import date, datetime, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (SQLite returns these) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_date(value: Optional[Union[datetime, date]], missing: str = "N/A") -> str:
    """Format as YYYY-MM-DD, or ``missing`` when there is no value."""
    if value is None:
        return missing
    if isinstance(value, datetime):
        value = ensure_aware(value)
    return value.strftime("%Y-%m-%d")
