"""
Form submission Pydantic models for the catalog pages

Every field validator trims and HTML-escapes the submitted text before
checking it, and raises at the first rule the value breaks, so a field
contributes at most one error message.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar
from datetime import date
from uuid import UUID

from markupsafe import escape
from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from models.book_instance import BookInstance
from models.enums import BookInstanceStatus
from models.genre import GENRE_NAME_MAX_LENGTH, GENRE_NAME_MIN_LENGTH
from utils.helpers import parse_identity, parse_iso8601_date

logger = logging.getLogger(__name__)

FormModel = TypeVar("FormModel", bound=BaseModel)

def clean_text(value: Any) -> str:
    """Trim and HTML-escape a submitted value; missing values become ''"""
    if value is None:
        return ""
    return str(escape(str(value).strip()))


class BookInstanceForm(BaseModel):
    """Create and update submissions for a book copy"""
    book: UUID
    imprint: str
    status: BookInstanceStatus = BookInstanceStatus.MAINTENANCE
    due_back: Optional[date] = None

    @field_validator("book", mode="before")
    @classmethod
    def validate_book(cls, v):
        v = clean_text(v)
        if not v:
            raise PydanticCustomError("book_missing", "Book must be specified")
        identity = parse_identity(v)
        if identity is None:
            raise PydanticCustomError("book_invalid", "Invalid book selection")
        return identity

    @field_validator("imprint", mode="before")
    @classmethod
    def validate_imprint(cls, v):
        v = clean_text(v)
        if not v:
            raise PydanticCustomError("imprint_missing", "Imprint must be specified")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        v = clean_text(v)
        if not v:
            return BookInstanceStatus.MAINTENANCE
        if v not in BookInstanceStatus.values():
            raise PydanticCustomError("status_invalid", "Invalid status")
        return v

    @field_validator("due_back", mode="before")
    @classmethod
    def validate_due_back(cls, v):
        if v is None or not str(v).strip():
            return None
        parsed = parse_iso8601_date(str(v))
        if parsed is None:
            raise PydanticCustomError("date_invalid", "Invalid date")
        return parsed

    def to_record(self, instance_id: Optional[UUID] = None) -> BookInstance:
        """Build the record to persist, keeping instance_id when one is given"""
        return BookInstance(
            instance_id=instance_id,
            book_id=self.book,
            imprint=self.imprint,
            status=self.status,
            due_back=self.due_back
        )


class GenreForm(BaseModel):
    """Create submissions for a genre"""
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        # Minimum applies to the typed name, maximum to the stored (escaped) name
        v = "" if v is None else str(v).strip()
        if len(v) < GENRE_NAME_MIN_LENGTH:
            raise PydanticCustomError(
                "name_too_short",
                "Genre name must contain at least {min_length} characters",
                {"min_length": GENRE_NAME_MIN_LENGTH}
            )
        v = clean_text(v)
        if len(v) > GENRE_NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_too_long",
                "Genre name must be at most {max_length} characters",
                {"max_length": GENRE_NAME_MAX_LENGTH}
            )
        return v


def form_errors(exc: ValidationError) -> List[Dict[str, str]]:
    """Flatten a ValidationError into the [{field, message}] list the form templates render"""
    return [
        {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]

def submitted_values(form_model: Type[BaseModel], form: Mapping[str, Any]) -> Dict[str, str]:
    """Cleaned text of every form field, for re-rendering a rejected submission"""
    return {name: clean_text(form.get(name)) for name in form_model.model_fields}

def validate_form(
    form_model: Type[FormModel],
    form: Mapping[str, Any]
) -> Tuple[Optional[FormModel], List[Dict[str, str]]]:
    """
    Validate a submitted form against a form model

    Fields missing from the submission are validated as None so each one
    reports its own message rather than a generic "Field required".

    Returns:
        (model, []) when valid, (None, errors) otherwise
    """
    data = {name: form.get(name) for name in form_model.model_fields}
    try:
        return form_model.model_validate(data), []
    except ValidationError as e:
        errors = form_errors(e)
        logger.info(f"{form_model.__name__} rejected: {[error['field'] for error in errors]}")
        return None, errors
