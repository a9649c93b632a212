"""
Enum definitions for the Library Catalog
"""

from enum import Enum

class BookInstanceStatus(str, Enum):
    """
    Circulation status of a physical book copy.

    - AVAILABLE: On the shelf and can be borrowed
    - MAINTENANCE: Withdrawn for repair (default for new copies)
    - LOANED: Checked out, see due_back
    - RESERVED: Held for a patron
    """
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def values(cls):
        return [status.value for status in cls]
