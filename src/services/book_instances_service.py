"""
Book instances service - business logic for physical book copies
"""

import logging
from typing import Any, Dict, List, Optional

from models.book import Book
from models.book_instance import BookInstance
from models.enums import BookInstanceStatus
from services.base_service import BaseService
from utils.helpers import parse_identity

logger = logging.getLogger(__name__)

INSTANCE_FIELDS = ["instance_id", "book_id", "imprint", "status", "due_back"]

# Instance columns joined with the owning book (populate)
POPULATED_SELECT = (
    "SELECT bi.instance_id, bi.book_id, bi.imprint, bi.status, bi.due_back, "
    "b.title AS book_title, b.isbn AS book_isbn "
    "FROM book_instances bi JOIN books b ON b.book_id = bi.book_id"
)

class BookInstancesService(BaseService):
    """Service for book instance operations"""

    def __init__(self):
        super().__init__("book_instances", "instance_id", INSTANCE_FIELDS)

    async def list_instances(self) -> List[BookInstance]:
        """All instances, each populated with its book"""
        query = f"{POPULATED_SELECT} ORDER BY b.title ASC, bi.imprint ASC"
        rows = await self._fetch(query)
        return [self._to_instance(dict(row)) for row in rows]

    async def get_instance(self, instance_id, populate: bool = True) -> Optional[BookInstance]:
        """
        Get an instance by its ID

        Args:
            instance_id: UUID of the instance (malformed values match nothing)
            populate: Join the owning book's data into the result

        Returns:
            The instance, or None when absent
        """
        identity = parse_identity(instance_id)
        if identity is None:
            return None

        if not populate:
            row = await self.find_by_id(identity)
            return self._to_instance(row) if row else None

        row = await self._fetchrow(f"{POPULATED_SELECT} WHERE bi.instance_id = $1", identity)
        return self._to_instance(dict(row)) if row else None

    async def create_instance(self, instance: BookInstance) -> BookInstance:
        logger.info(f"Creating book instance for book {instance.book_id}")
        row = await self.create(self._to_values(instance))
        return self._to_instance(row)

    async def update_instance(self, instance_id, instance: BookInstance) -> Optional[BookInstance]:
        """Replace the stored fields of an instance, keeping its identity"""
        logger.info(f"Updating book instance {instance_id}")
        row = await self.update(instance_id, self._to_values(instance))
        return self._to_instance(row) if row else None

    async def delete_instance(self, instance_id) -> bool:
        deleted = await self.delete(instance_id)
        logger.info(f"Delete book instance {instance_id}: {'removed' if deleted else 'no matching record'}")
        return deleted

    async def count_instances(self, status: Optional[BookInstanceStatus] = None) -> int:
        filters = {"status": status.value} if status else None
        return await self.count(filters)

    @staticmethod
    def _to_values(instance: BookInstance) -> Dict[str, Any]:
        return {
            "book_id": instance.book_id,
            "imprint": instance.imprint,
            "status": instance.status.value,
            "due_back": instance.due_back
        }

    @staticmethod
    def _to_instance(row: Dict[str, Any]) -> BookInstance:
        book = None
        if row.get("book_title") is not None:
            book = Book(book_id=row["book_id"], title=row["book_title"], isbn=row.get("book_isbn"))
        return BookInstance(
            instance_id=row["instance_id"],
            book_id=row["book_id"],
            book=book,
            imprint=row["imprint"],
            status=row["status"],
            due_back=row.get("due_back")
        )


# Global service instance
_book_instances_service = None

def get_book_instances_service() -> BookInstancesService:
    """Get the global book instances service instance"""
    global _book_instances_service
    if _book_instances_service is None:
        _book_instances_service = BookInstancesService()
    return _book_instances_service
