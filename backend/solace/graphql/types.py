"""
Solace Backend — GraphQL Object Types
======================================

What:  Strawberry types exposed by the /graphql endpoint.
How:   Each type is a plain projection of the matching read-model schema
       (solace.schemas.responses); `from_response` does the conversion so
       resolvers never touch ORM rows. Field names are camelCased by
       Strawberry (reading_plan → readingPlan, is_read → isRead).
"""

from datetime import datetime
from typing import List, Optional

import strawberry

from solace.schemas.responses import (
    FeedbackResponse,
    ProblemResponse,
    ReadingPlanItemResponse,
    ReadingPlanResponse,
    UserResponse,
    VerseResponse,
)


@strawberry.type(description="A Bible verse from the pre-seeded reference table.")
class Verse:
    id: strawberry.ID
    book: str
    chapter: int
    verse: int
    text: str
    citation: str

    @classmethod
    def from_response(cls, verse: VerseResponse) -> "Verse":
        return cls(
            id=strawberry.ID(str(verse.id)),
            book=verse.book,
            chapter=verse.chapter,
            verse=verse.verse,
            text=verse.text,
            citation=verse.citation,
        )


@strawberry.type(description="One verse of a reading plan and whether it has been read.")
class ReadingPlanItem:
    id: strawberry.ID
    reading_plan_id: strawberry.ID
    verse: Verse
    item_order: int
    is_read: bool
    created_at: datetime
    updated_at: Optional[datetime]

    @classmethod
    def from_response(cls, item: ReadingPlanItemResponse) -> "ReadingPlanItem":
        return cls(
            id=strawberry.ID(str(item.id)),
            reading_plan_id=strawberry.ID(str(item.reading_plan_id)),
            verse=Verse.from_response(item.verse),
            item_order=item.item_order,
            is_read=item.is_read,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


@strawberry.type(description="A problem described by a user, with optional advice and plan.")
class Problem:
    id: strawberry.ID
    user_id: strawberry.ID
    title: str
    description: str
    context: Optional[str]
    category: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]
    advice: Optional[str]
    reading_plan: Optional["ReadingPlan"]

    @classmethod
    def from_response(cls, problem: ProblemResponse) -> "Problem":
        plan = problem.reading_plan
        return cls(
            id=strawberry.ID(str(problem.id)),
            user_id=strawberry.ID(str(problem.user_id)),
            title=problem.title,
            description=problem.description,
            context=problem.context,
            category=problem.category,
            created_at=problem.created_at,
            updated_at=problem.updated_at,
            advice=problem.advice,
            reading_plan=ReadingPlan.from_response(plan) if plan is not None else None,
        )


@strawberry.type(description="Ordered verses assigned to a problem.")
class ReadingPlan:
    id: strawberry.ID
    problem_id: strawberry.ID
    created_at: datetime
    updated_at: Optional[datetime]
    items: List[ReadingPlanItem]
    problem: Optional[Problem]

    @classmethod
    def from_response(cls, plan: ReadingPlanResponse) -> "ReadingPlan":
        return cls(
            id=strawberry.ID(str(plan.id)),
            problem_id=strawberry.ID(str(plan.problem_id)),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
            items=[ReadingPlanItem.from_response(item) for item in plan.items],
            problem=Problem.from_response(plan.problem) if plan.problem is not None else None,
        )


@strawberry.type(description="An account and every problem it owns, oldest first.")
class User:
    id: strawberry.ID
    username: str
    email: str
    created_at: datetime
    problems: List[Problem]

    @classmethod
    def from_response(cls, user: UserResponse) -> "User":
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            email=user.email,
            created_at=user.created_at,
            problems=[Problem.from_response(problem) for problem in user.problems],
        )


@strawberry.type(description="The caller's rating of the advice on one of their problems.")
class Feedback:
    id: strawberry.ID
    problem_id: strawberry.ID
    user_id: strawberry.ID
    rating: int
    feedback_text: Optional[str]
    is_helpful: Optional[bool]
    created_at: datetime
    updated_at: Optional[datetime]

    @classmethod
    def from_response(cls, feedback: FeedbackResponse) -> "Feedback":
        return cls(
            id=strawberry.ID(str(feedback.id)),
            problem_id=strawberry.ID(str(feedback.problem_id)),
            user_id=strawberry.ID(str(feedback.user_id)),
            rating=feedback.rating,
            feedback_text=feedback.feedback_text,
            is_helpful=feedback.is_helpful,
            created_at=feedback.created_at,
            updated_at=feedback.updated_at,
        )
