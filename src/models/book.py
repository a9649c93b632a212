"""
Book Pydantic models

Books are owned by another part of the catalog; here they are only read to
populate instance dropdowns and join display.
"""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel

class BookSummary(BaseModel):
    """Identity and title only, as used by selection controls"""
    book_id: UUID
    title: str

class Book(BookSummary):
    isbn: Optional[str] = None
