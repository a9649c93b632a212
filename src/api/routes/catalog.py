"""
Catalog home page
"""

from fastapi import APIRouter, Depends, Request

from api.templating import templates
from models.enums import BookInstanceStatus
from services.book_instances_service import BookInstancesService, get_book_instances_service
from services.books_service import BooksService, get_books_service
from services.genres_service import GenresService, get_genres_service
from utils.concurrency import fetch_all

router = APIRouter()

@router.get("")
async def index(
    request: Request,
    books: BooksService = Depends(get_books_service),
    instances: BookInstancesService = Depends(get_book_instances_service),
    genres: GenresService = Depends(get_genres_service)
):
    """Record counts for the catalog home page"""
    counts = await fetch_all(
        book_count=books.count_books(),
        book_instance_count=instances.count_instances(),
        book_instance_available_count=instances.count_instances(BookInstanceStatus.AVAILABLE),
        genre_count=genres.count_genres()
    )
    return templates.TemplateResponse(request, "index.html", {
        "title": "Local Library Home",
        "data": counts,
    })
