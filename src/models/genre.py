"""
Genre Pydantic models
"""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from config.settings import CATALOG_PREFIX

GENRE_NAME_MIN_LENGTH = 3
GENRE_NAME_MAX_LENGTH = 100

class Genre(BaseModel):
    genre_id: Optional[UUID] = None
    name: str = Field(..., min_length=GENRE_NAME_MIN_LENGTH, max_length=GENRE_NAME_MAX_LENGTH)

    @property
    def url(self) -> str:
        """Display URL derived from identity (never stored)"""
        return f"{CATALOG_PREFIX}/genre/{self.genre_id}"
