"""
Genre pages - list, detail and create form
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from api.templating import templates
from models.forms import GenreForm, submitted_values, validate_form
from services.books_service import BooksService, get_books_service
from services.genres_service import GenresService, get_genres_service
from utils.concurrency import fetch_all
from utils.error_handling import NotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/genres")
async def genre_list(
    request: Request,
    genres: GenresService = Depends(get_genres_service)
):
    """Display list of all genres"""
    genre_list = await genres.list_genres()
    return templates.TemplateResponse(request, "genre_list.html", {
        "title": "Genre List",
        "genre_list": genre_list,
    })

@router.get("/genre/create")
async def genre_create_get(request: Request):
    return templates.TemplateResponse(request, "genre_form.html", {
        "title": "Create Genre",
        "genre": None,
        "errors": [],
    })

@router.post("/genre/create")
async def genre_create_post(
    request: Request,
    genres: GenresService = Depends(get_genres_service)
):
    """Handle genre create, reusing an existing genre with the same name"""
    form = await request.form()
    submission, errors = validate_form(GenreForm, form)

    if submission is None:
        return templates.TemplateResponse(request, "genre_form.html", {
            "title": "Create Genre",
            "genre": submitted_values(GenreForm, form),
            "errors": errors,
        })

    name = submission.name

    existing = await genres.find_by_name(name)
    if existing:
        logger.info(f"Genre '{name}' already exists, redirecting")
        return RedirectResponse(url=existing.url, status_code=303)

    genre = await genres.create_genre(name)
    return RedirectResponse(url=genre.url, status_code=303)

@router.get("/genre/{genre_id}")
async def genre_detail(
    request: Request,
    genre_id: str,
    genres: GenresService = Depends(get_genres_service),
    books: BooksService = Depends(get_books_service)
):
    """Display a genre and the books filed under it"""
    results = await fetch_all(
        genre=genres.get_genre(genre_id),
        genre_books=books.list_by_genre(genre_id)
    )
    if results["genre"] is None:
        raise NotFoundError("Genre not found")

    return templates.TemplateResponse(request, "genre_detail.html", {
        "title": "Genre Detail",
        "genre": results["genre"],
        "genre_books": results["genre_books"],
    })
