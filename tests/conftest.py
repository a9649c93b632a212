"""
pytest configuration and fixtures for the catalog test suite
Routes run against in-memory services; no database is required.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fastapi.testclient import TestClient

from app import app
from services.book_instances_service import get_book_instances_service
from services.books_service import get_books_service
from services.genres_service import get_genres_service
from fakes import (
    FakeBookInstancesService,
    FakeBooksService,
    FakeGenresService,
    InMemoryCatalog,
)


@pytest.fixture
def catalog():
    """Empty in-memory catalog shared by the fake services"""
    return InMemoryCatalog()


@pytest.fixture
def client(catalog):
    """HTTP client with every service dependency pointed at the in-memory catalog"""
    app.dependency_overrides[get_books_service] = lambda: FakeBooksService(catalog)
    app.dependency_overrides[get_genres_service] = lambda: FakeGenresService(catalog)
    app.dependency_overrides[get_book_instances_service] = lambda: FakeBookInstancesService(catalog)

    # Not entered as a context manager so the lifespan (database pool) never runs
    test_client = TestClient(app, raise_server_exceptions=False)
    yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def book(catalog):
    return catalog.add_book("The Name of the Wind", isbn="9780756404741")


@pytest.fixture
def other_book(catalog):
    return catalog.add_book("Apes and Angels", isbn="9780765379528")
