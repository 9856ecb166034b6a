"""Date parsing for order documents.

Dates reach us as ``date``/``datetime`` objects, ISO strings, the
``MM-DD-YYYY`` strings typed into older forms, or document-store timestamps
serialized as ``{"seconds": ...}`` mappings.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

DATE_FORMATS = ('%Y-%m-%d', '%m-%d-%Y', '%m/%d/%Y')


def parse_date(value: Any) -> Optional[date]:
    """Parse a document date field.

    Args:
        value: Raw field value

    Returns:
        The calendar date, or None when the value is missing or unreadable
    """
    if value is None or value == '':
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, dict):
        seconds = value.get('seconds', value.get('_seconds'))
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(float(seconds), tz=timezone.utc).date()
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Invalid timestamp mapping: {value}")
            return None

    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        logger.warning(f"Invalid date format: {value}")
        return None

    return None


def to_iso(value: Any) -> Optional[str]:
    """Serialize a date or datetime for storage in a document."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)
