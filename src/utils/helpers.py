"""
Utility functions and helpers
"""

import logging
import re
from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID

logger = logging.getLogger(__name__)

# Reduced-precision ISO 8601 calendar dates: YYYY or YYYY-MM
REDUCED_DATE_PATTERN = re.compile(r"^(\d{4})(?:-(\d{2}))?$")

def parse_identity(value: Union[str, UUID, None]) -> Optional[UUID]:
    """Parse a record identity, returning None when it is not a well-formed UUID"""
    if isinstance(value, UUID):
        return value
    if not value:
        return None
    try:
        return UUID(str(value).strip())
    except ValueError:
        logger.debug(f"Ignoring malformed identity '{value}'")
        return None

def parse_iso8601_date(value: str) -> Optional[date]:
    """
    Parse an ISO 8601 date or datetime string into a calendar date

    Reduced-precision dates (2026, 2026-10) resolve to the first day of the period.
    """
    value = value.strip()
    if not value:
        return None

    reduced = REDUCED_DATE_PATTERN.match(value)
    if reduced:
        try:
            return date(int(reduced.group(1)), int(reduced.group(2) or 1), 1)
        except ValueError:
            return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    # Handle ISO format with 'Z' (UTC)
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None
