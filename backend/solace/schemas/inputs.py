"""
Solace Backend — Mutation Input Schemas
========================================

What:  Pydantic models validating the arguments of createUser,
       createProblem, submitFeedback and the verses filter before anything
       touches the database.
How:   The services build these models from the raw arguments and convert a
       pydantic ValidationError into the application's ValidationError.
"""

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from solace.exceptions import ValidationError

InputModel = TypeVar("InputModel", bound=BaseModel)


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=255)
    password: str = Field(min_length=8, max_length=256)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Username must not be blank")
        return stripped

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Minimal shape check; deliverability is the identity provider's job."""
        candidate = v.strip().lower()
        local, sep, domain = candidate.partition("@")
        if not sep or not local or "." not in domain or " " in candidate:
            raise ValueError(f"'{v}' is not a valid email address")
        return candidate


class ProblemCreate(BaseModel):
    """
    Title and description are required and may not be blank; context and
    category are optional and normalized to None when blank.
    """

    title: str = Field(max_length=200)
    description: str
    context: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)

    @field_validator("title", "description")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("context", "category")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v


class FeedbackCreate(BaseModel):
    """Rating 1..5 is required; the free-text comment is dropped when blank."""

    rating: int = Field(ge=1, le=5)
    feedback_text: Optional[str] = Field(default=None, max_length=2000)
    is_helpful: Optional[bool] = None

    @field_validator("feedback_text")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v


class VerseFilter(BaseModel):
    """Optional book / chapter filter for verse browsing."""

    book: Optional[str] = Field(default=None, max_length=50)
    chapter: Optional[int] = Field(default=None, gt=0)

    @field_validator("book")
    @classmethod
    def strip_book(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


def parse_input(model: Type[InputModel], **values: Any) -> InputModel:
    """
    Validates raw mutation arguments against `model`.

    Raises:
        solace.exceptions.ValidationError naming the first offending field.
    """
    try:
        return model(**values)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            message=f"Invalid {field or 'input'}: {first.get('msg', 'invalid value')}",
            field=field,
            context={"error_count": e.error_count()},
        ) from e
