"""
Solace Backend — Read-Model Schemas
====================================

What:  Pydantic models for the nested read-model the services return:
       User → Problems → ReadingPlan → ordered ReadingPlanItems → Verse.
Why:   The services stay independent of the GraphQL layer; the GraphQL types
       are built from these models, and tests assert against them directly.
How:   `from_attributes` lets leaf models validate straight from ORM rows;
       composite models are assembled by the services.

Design Decision:
    Schemas are separate from SQLAlchemy models because the read-model is
    a composition of several tables, and because internal columns
    (password_hash) must never be exposed.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class VerseResponse(BaseModel):
    """Immutable reference record for one Bible verse."""

    id: uuid.UUID
    book: str
    chapter: int = Field(gt=0)
    verse: int = Field(gt=0)
    text: str

    model_config = {"from_attributes": True}

    @property
    def citation(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"


class ReadingPlanItemResponse(BaseModel):
    """One verse entry of a plan with its verse resolved."""

    id: uuid.UUID
    reading_plan_id: uuid.UUID
    verse: VerseResponse
    item_order: int = Field(gt=0)
    is_read: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class ReadingPlanResponse(BaseModel):
    """
    A plan with its items in ascending item_order.

    `problem` is only populated by the readingPlan(id) query; when the plan
    is reached through its problem the back-reference stays empty.
    """

    id: uuid.UUID
    problem_id: uuid.UUID
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[ReadingPlanItemResponse] = Field(default_factory=list)
    problem: Optional["ProblemResponse"] = None


class ProblemResponse(BaseModel):
    """A problem; `reading_plan` is None when the problem has no plan."""

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    context: Optional[str] = None
    category: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    advice: Optional[str] = None
    reading_plan: Optional[ReadingPlanResponse] = None

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    """A user with every problem they own, oldest first."""

    id: uuid.UUID
    username: str
    email: str
    created_at: datetime
    problems: List[ProblemResponse] = Field(default_factory=list)


class FeedbackResponse(BaseModel):
    """A user's rating of the advice on one of their problems."""

    id: uuid.UUID
    problem_id: uuid.UUID
    user_id: uuid.UUID
    rating: int = Field(ge=1, le=5)
    feedback_text: Optional[str] = None
    is_helpful: Optional[bool] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    advice_generator: str = Field(description="Advice generator: configured, unconfigured")
    uptime_seconds: float = Field(description="Seconds since service started")


class ErrorResponse(BaseModel):
    """Standardized error body for the REST endpoints."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


ReadingPlanResponse.model_rebuild()
