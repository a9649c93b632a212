"""
In-memory stand-ins for the catalog services and the asyncpg pool
"""

import contextlib
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from models.book import Book, BookSummary
from models.book_instance import BookInstance
from models.enums import BookInstanceStatus
from models.genre import Genre
from utils.helpers import parse_identity


class InMemoryCatalog:
    """Shared record store behind the fake services"""

    def __init__(self):
        self.books: Dict[uuid.UUID, Book] = {}
        self.genres: Dict[uuid.UUID, Genre] = {}
        self.book_genres: set = set()
        self.instances: Dict[uuid.UUID, BookInstance] = {}
        self.failure: Optional[Exception] = None

    def check(self):
        if self.failure is not None:
            raise self.failure

    def add_book(self, title: str, isbn: Optional[str] = None) -> Book:
        book = Book(book_id=uuid.uuid4(), title=title, isbn=isbn)
        self.books[book.book_id] = book
        return book

    def add_genre(self, name: str, books: List[Book] = ()) -> Genre:
        genre = Genre(genre_id=uuid.uuid4(), name=name)
        self.genres[genre.genre_id] = genre
        for book in books:
            self.book_genres.add((book.book_id, genre.genre_id))
        return genre

    def add_instance(
        self,
        book: Book,
        imprint: str,
        status: BookInstanceStatus = BookInstanceStatus.AVAILABLE,
        due_back: Optional[date] = None
    ) -> BookInstance:
        instance = BookInstance(
            instance_id=uuid.uuid4(),
            book_id=book.book_id,
            imprint=imprint,
            status=status,
            due_back=due_back
        )
        self.instances[instance.instance_id] = instance
        return instance

    def populate(self, instance: BookInstance) -> BookInstance:
        return instance.model_copy(update={"book": self.books.get(instance.book_id)})


class FakeBooksService:
    def __init__(self, catalog: InMemoryCatalog):
        self.catalog = catalog

    async def list_titles(self) -> List[BookSummary]:
        self.catalog.check()
        books = sorted(self.catalog.books.values(), key=lambda b: b.title)
        return [BookSummary(book_id=b.book_id, title=b.title) for b in books]

    async def get_book(self, book_id) -> Optional[Book]:
        self.catalog.check()
        return self.catalog.books.get(parse_identity(book_id))

    async def list_by_genre(self, genre_id) -> List[Book]:
        self.catalog.check()
        identity = parse_identity(genre_id)
        books = [self.catalog.books[b] for b, g in self.catalog.book_genres if g == identity]
        return sorted(books, key=lambda b: b.title)

    async def count_books(self) -> int:
        self.catalog.check()
        return len(self.catalog.books)


class FakeGenresService:
    def __init__(self, catalog: InMemoryCatalog):
        self.catalog = catalog

    async def list_genres(self) -> List[Genre]:
        self.catalog.check()
        return sorted(self.catalog.genres.values(), key=lambda g: g.name)

    async def get_genre(self, genre_id) -> Optional[Genre]:
        self.catalog.check()
        return self.catalog.genres.get(parse_identity(genre_id))

    async def find_by_name(self, name: str) -> Optional[Genre]:
        self.catalog.check()
        for genre in self.catalog.genres.values():
            if genre.name.casefold() == name.casefold():
                return genre
        return None

    async def create_genre(self, name: str) -> Genre:
        self.catalog.check()
        genre = Genre(genre_id=uuid.uuid4(), name=name)
        self.catalog.genres[genre.genre_id] = genre
        return genre

    async def count_genres(self) -> int:
        self.catalog.check()
        return len(self.catalog.genres)


class FakeBookInstancesService:
    def __init__(self, catalog: InMemoryCatalog):
        self.catalog = catalog

    async def list_instances(self) -> List[BookInstance]:
        self.catalog.check()
        return [self.catalog.populate(i) for i in self.catalog.instances.values()]

    async def get_instance(self, instance_id, populate: bool = True) -> Optional[BookInstance]:
        self.catalog.check()
        instance = self.catalog.instances.get(parse_identity(instance_id))
        if instance is None:
            return None
        return self.catalog.populate(instance) if populate else instance

    async def create_instance(self, instance: BookInstance) -> BookInstance:
        self.catalog.check()
        stored = instance.model_copy(update={"instance_id": uuid.uuid4()})
        self.catalog.instances[stored.instance_id] = stored
        return stored

    async def update_instance(self, instance_id, instance: BookInstance) -> Optional[BookInstance]:
        self.catalog.check()
        identity = parse_identity(instance_id)
        if identity not in self.catalog.instances:
            return None
        stored = instance.model_copy(update={"instance_id": identity, "book": None})
        self.catalog.instances[identity] = stored
        return stored

    async def delete_instance(self, instance_id) -> bool:
        self.catalog.check()
        return self.catalog.instances.pop(parse_identity(instance_id), None) is not None

    async def count_instances(self, status: Optional[BookInstanceStatus] = None) -> int:
        self.catalog.check()
        return sum(1 for i in self.catalog.instances.values() if status is None or i.status == status)


class FakeConnection:
    """Records every statement and answers with canned results"""

    def __init__(self, rows=None, row=None, value=None, execute_result="DELETE 1", error=None):
        self.rows = rows or []
        self.row = row
        self.value = value
        self.execute_result = execute_result
        self.error = error
        self.queries: List[Any] = []

    def _record(self, query, params):
        self.queries.append((query, list(params)))
        if self.error is not None:
            raise self.error

    async def fetch(self, query, *params):
        self._record(query, params)
        return self.rows

    async def fetchrow(self, query, *params):
        self._record(query, params)
        return self.row

    async def fetchval(self, query, *params):
        self._record(query, params)
        return self.value

    async def execute(self, query, *params):
        self._record(query, params)
        return self.execute_result

    @contextlib.asynccontextmanager
    async def transaction(self):
        yield


class FakePool:
    def __init__(self, connection: FakeConnection):
        self.connection = connection

    @contextlib.asynccontextmanager
    async def acquire(self):
        yield self.connection
