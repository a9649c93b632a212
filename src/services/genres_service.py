"""
Genres service - business logic for genre management
"""

import logging
from typing import List, Optional

from models.genre import Genre
from services.base_service import BaseService

logger = logging.getLogger(__name__)

class GenresService(BaseService):
    """Service for genre operations"""

    def __init__(self):
        super().__init__("genres", "genre_id", ["genre_id", "name"])

    async def list_genres(self) -> List[Genre]:
        rows = await self.find_all(order_by=[{"field": "name", "dir": "asc"}])
        return [Genre(**row) for row in rows]

    async def get_genre(self, genre_id) -> Optional[Genre]:
        row = await self.find_by_id(genre_id)
        return Genre(**row) if row else None

    async def find_by_name(self, name: str) -> Optional[Genre]:
        """Case-insensitive exact name match"""
        # ILIKE wildcards in the name must match literally
        pattern = name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = await self.find_all(filters={"name": {"op": "ILIKE", "value": pattern}}, limit=1)
        return Genre(**rows[0]) if rows else None

    async def create_genre(self, name: str) -> Genre:
        """
        Create a new genre

        The Genre model enforces the name length bounds before anything is written.

        Raises:
            pydantic.ValidationError: name outside 3-100 characters
        """
        genre = Genre(name=name)
        logger.info(f"Creating genre: {genre.name}")
        row = await self.create({"name": genre.name})
        return Genre(**row)

    async def count_genres(self) -> int:
        return await self.count()


# Global service instance
_genres_service = None

def get_genres_service() -> GenresService:
    """Get the global genres service instance"""
    global _genres_service
    if _genres_service is None:
        _genres_service = GenresService()
    return _genres_service
