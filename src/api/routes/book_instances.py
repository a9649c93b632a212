"""
Book instance pages - list, detail, create, delete and update forms
All data access goes through the service layer.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from api.templating import templates
from config.settings import CATALOG_PREFIX
from models.book_instance import BookInstanceCandidate
from models.enums import BookInstanceStatus
from models.forms import BookInstanceForm, submitted_values, validate_form
from services.book_instances_service import BookInstancesService, get_book_instances_service
from services.books_service import BooksService, get_books_service
from utils.concurrency import fetch_all
from utils.error_handling import NotFoundError
from utils.helpers import parse_identity

router = APIRouter()
logger = logging.getLogger(__name__)

async def validate_submission(
    form: Mapping[str, Any],
    books: BooksService
) -> Tuple[Optional[BookInstanceForm], List[Dict[str, str]]]:
    """Validate a create/update submission, including that the chosen book still exists"""
    submission, errors = validate_form(BookInstanceForm, form)
    if submission is not None and await books.get_book(submission.book) is None:
        logger.info(f"Submitted book {submission.book} does not exist")
        return None, [{"field": "book", "message": "Selected book does not exist"}]
    return submission, errors

def build_candidate(form: Mapping[str, Any], instance_id: Optional[str] = None) -> BookInstanceCandidate:
    """Candidate record from the cleaned submitted text, for re-rendering a rejected form"""
    values = submitted_values(BookInstanceForm, form)
    return BookInstanceCandidate(
        instance_id=parse_identity(instance_id),
        book=values["book"],
        imprint=values["imprint"],
        status=values["status"],
        due_back=values["due_back"] or None
    )

def render_form(request: Request, title: str, book_list: List, bookinstance=None,
                selected_book: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
    return templates.TemplateResponse(request, "bookinstance_form.html", {
        "title": title,
        "book_list": book_list,
        "selected_book": selected_book,
        "bookinstance": bookinstance,
        "statuses": BookInstanceStatus.values(),
        "errors": errors or [],
    })


@router.get("/bookinstances")
async def bookinstance_list(
    request: Request,
    instances: BookInstancesService = Depends(get_book_instances_service)
):
    """Display list of all book instances"""
    bookinstance_list = await instances.list_instances()
    return templates.TemplateResponse(request, "bookinstance_list.html", {
        "title": "Book Instance List",
        "bookinstance_list": bookinstance_list,
    })

@router.get("/bookinstance/create")
async def bookinstance_create_get(
    request: Request,
    books: BooksService = Depends(get_books_service)
):
    """Display book instance create form"""
    book_list = await books.list_titles()
    return render_form(request, "Create BookInstance", book_list)

@router.post("/bookinstance/create")
async def bookinstance_create_post(
    request: Request,
    instances: BookInstancesService = Depends(get_book_instances_service),
    books: BooksService = Depends(get_books_service)
):
    """Handle book instance create"""
    form = await request.form()
    submission, errors = await validate_submission(form, books)

    if submission is None:
        # Render form again with cleaned values and error messages
        candidate = build_candidate(form)
        book_list = await books.list_titles()
        return render_form(
            request, "Create BookInstance", book_list,
            bookinstance=candidate,
            selected_book=candidate.book,
            errors=errors
        )

    bookinstance = await instances.create_instance(submission.to_record())
    return RedirectResponse(url=bookinstance.url, status_code=303)

@router.get("/bookinstance/{instance_id}")
async def bookinstance_detail(
    request: Request,
    instance_id: str,
    instances: BookInstancesService = Depends(get_book_instances_service)
):
    """Display detail page for a specific book instance"""
    bookinstance = await instances.get_instance(instance_id)
    if bookinstance is None:
        raise NotFoundError("Book copy not found")

    return templates.TemplateResponse(request, "bookinstance_detail.html", {
        "title": f"Copy: {bookinstance.book.title}",
        "bookinstance": bookinstance,
    })

@router.get("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_get(
    request: Request,
    instance_id: str,
    instances: BookInstancesService = Depends(get_book_instances_service)
):
    """Display book instance delete confirmation"""
    bookinstance = await instances.get_instance(instance_id)
    if bookinstance is None:
        raise NotFoundError("Book instance not found")

    return templates.TemplateResponse(request, "bookinstance_delete.html", {
        "title": "Delete Book Instance",
        "book_instance": bookinstance,
    })

@router.post("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_post(
    request: Request,
    instance_id: str,
    instances: BookInstancesService = Depends(get_book_instances_service)
):
    """
    Handle book instance delete

    The record removed is the one named by the bookinstanceid form field;
    the path segment only routes the request.
    """
    form = await request.form()
    target_id = (form.get("bookinstanceid") or "").strip()
    if not target_id:
        raise HTTPException(status_code=400, detail="Book instance must be specified")

    await instances.delete_instance(target_id)
    return RedirectResponse(url=f"{CATALOG_PREFIX}/bookinstances", status_code=303)

@router.get("/bookinstance/{instance_id}/update")
async def bookinstance_update_get(
    request: Request,
    instance_id: str,
    instances: BookInstancesService = Depends(get_book_instances_service),
    books: BooksService = Depends(get_books_service)
):
    """Display book instance update form"""
    results = await fetch_all(
        bookinstance=instances.get_instance(instance_id),
        books=books.list_titles()
    )
    bookinstance = results["bookinstance"]
    if bookinstance is None:
        raise NotFoundError("Book instance not found")

    return render_form(
        request, "Update BookInstance", results["books"],
        bookinstance=bookinstance,
        selected_book=str(bookinstance.book_id)
    )

@router.post("/bookinstance/{instance_id}/update")
async def bookinstance_update_post(
    request: Request,
    instance_id: str,
    instances: BookInstancesService = Depends(get_book_instances_service),
    books: BooksService = Depends(get_books_service)
):
    """Handle book instance update"""
    form = await request.form()
    submission, errors = await validate_submission(form, books)

    if submission is None:
        results = await fetch_all(
            bookinstance=instances.get_instance(instance_id, populate=False),
            books=books.list_titles()
        )
        if results["bookinstance"] is None:
            raise NotFoundError("Book instance not found")

        candidate = build_candidate(form, instance_id)
        return render_form(
            request, "Update BookInstance", results["books"],
            bookinstance=candidate,
            selected_book=candidate.book,
            errors=errors
        )

    # Replacement record keeps the original identity
    bookinstance = await instances.update_instance(
        instance_id,
        submission.to_record(instance_id=parse_identity(instance_id))
    )
    if bookinstance is None:
        raise NotFoundError("Book instance not found")

    return RedirectResponse(url=bookinstance.url, status_code=303)
