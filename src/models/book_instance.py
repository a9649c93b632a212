"""
Book instance (physical copy) Pydantic models
"""

from typing import Optional, Union
from datetime import date
from uuid import UUID
from pydantic import BaseModel, Field

from config.settings import CATALOG_PREFIX
from models.book import Book
from models.enums import BookInstanceStatus

class BookInstance(BaseModel):
    """Stored copy of a book, optionally populated with its Book"""
    instance_id: Optional[UUID] = None
    book_id: UUID
    book: Optional[Book] = None
    imprint: str = Field(..., min_length=1)
    status: BookInstanceStatus = BookInstanceStatus.MAINTENANCE
    due_back: Optional[date] = None

    @property
    def url(self) -> str:
        return f"{CATALOG_PREFIX}/bookinstance/{self.instance_id}"

    @property
    def due_back_formatted(self) -> str:
        """Due date as shown on list/detail pages, e.g. 'Oct 19, 2026'"""
        if self.due_back is None:
            return ""
        return f"{self.due_back:%b} {self.due_back.day}, {self.due_back.year}"

    @property
    def due_back_iso(self) -> str:
        """Due date in the YYYY-MM-DD form expected by date inputs"""
        return self.due_back.isoformat() if self.due_back else ""


class BookInstanceCandidate(BaseModel):
    """
    Rejected book instance submission.

    Holds what the user typed, trimmed and escaped, so the form can be
    re-rendered with it.
    """
    instance_id: Optional[UUID] = None
    book: str = ""
    imprint: str = ""
    status: str = ""
    due_back: Optional[Union[date, str]] = None

    @property
    def due_back_iso(self) -> str:
        if isinstance(self.due_back, date):
            return self.due_back.isoformat()
        return self.due_back or ""

