"""
Books service - read access to the book collection
"""

import logging
from typing import List, Optional

from models.book import Book, BookSummary
from services.base_service import BaseService
from utils.helpers import parse_identity

logger = logging.getLogger(__name__)

class BooksService(BaseService):
    """Read-only queries over books, used for dropdowns and joins"""

    def __init__(self):
        super().__init__("books", "book_id", ["book_id", "title", "isbn"])

    async def list_titles(self) -> List[BookSummary]:
        """All books, identity and title only, ordered by title"""
        rows = await self.find_all(
            fields=["book_id", "title"],
            order_by=[{"field": "title", "dir": "asc"}]
        )
        return [BookSummary(**row) for row in rows]

    async def get_book(self, book_id) -> Optional[Book]:
        row = await self.find_by_id(book_id)
        return Book(**row) if row else None

    async def list_by_genre(self, genre_id) -> List[Book]:
        """Books linked to a genre, ordered by title"""
        identity = parse_identity(genre_id)
        if identity is None:
            return []

        query = (
            "SELECT b.book_id, b.title, b.isbn FROM books b "
            "JOIN book_genres bg ON bg.book_id = b.book_id "
            "WHERE bg.genre_id = $1 ORDER BY b.title ASC"
        )
        rows = await self._fetch(query, identity)
        return [Book(**dict(row)) for row in rows]

    async def count_books(self) -> int:
        return await self.count()


# Global service instance
_books_service = None

def get_books_service() -> BooksService:
    """Get the global books service instance"""
    global _books_service
    if _books_service is None:
        _books_service = BooksService()
    return _books_service
