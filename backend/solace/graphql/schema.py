"""
Solace Backend — GraphQL Schema
================================

What:  Query and Mutation roots of the /graphql endpoint.
How:   Resolvers are thin: parse nothing themselves, call one service method
       under the request deadline, convert the read-model into GraphQL types.

Operation Inventory:
    Query
        user(id)                  → User        (problems, oldest first)
        problem(id)               → Problem     (readingPlan may be null)
        readingPlan(id)           → ReadingPlan (with its problem)
        verses(book?, chapter?)   → [Verse]     (chapter, then verse order)
    Mutation
        createUser(username, email, password)          → User
        createProblem(title, description, context?, category?) → Problem
            owner = authenticated caller (bearer token subject)
        markVerseAsRead(readingPlanId, verseId, isRead) → ReadingPlanItem
        generateAdvice(problemId)                      → Problem
        submitFeedback(problemId, rating, feedbackText?, isHelpful?) → Feedback
            caller must own the problem

Transactions:
    A mutation commits inside run_operation, before Strawberry serializes
    its result, so a commit failure is reported as database_error instead
    of a success the database never kept. Any failure rolls back the
    request's session. Application errors are returned with extensions.code
    set to the error kind (see graphql/errors.py).
"""

import logging
from typing import Awaitable, List, Optional, TypeVar

import strawberry
from strawberry.extensions import MaskErrors
from strawberry.types import Info

from solace.database import storage_errors
from solace.exceptions import AuthenticationError, SolaceError
from solace.graphql.context import GraphQLContext
from solace.graphql.errors import should_mask_error, to_graphql_error
from solace.graphql.types import Feedback, Problem, ReadingPlan, ReadingPlanItem, User, Verse
from solace.services.deadline import within_deadline

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_operation(
    info: Info,
    operation: str,
    awaitable: Awaitable[T],
    commit: bool = False,
) -> T:
    """
    Runs one service call under the request deadline.

    With commit=True the session is committed before the result is returned;
    a failed commit is rolled back and surfaces as database_error.
    """
    context: GraphQLContext = info.context
    try:
        result = await within_deadline(awaitable, context.request_timeout, operation)
        if commit:
            with storage_errors(f"complete the {operation}"):
                await context.session.commit()
        return result
    except SolaceError as exc:
        await context.session.rollback()
        raise to_graphql_error(exc) from exc
    except Exception:
        await context.session.rollback()
        raise


@strawberry.type
class Query:
    @strawberry.field(description="A user and all problems they own.")
    async def user(self, info: Info, id: strawberry.ID) -> Optional[User]:
        result = await run_operation(info, "user lookup", info.context.users.get_user(id))
        return User.from_response(result)

    @strawberry.field(description="A problem and its reading plan, if one exists.")
    async def problem(self, info: Info, id: strawberry.ID) -> Optional[Problem]:
        result = await run_operation(info, "problem lookup", info.context.problems.get_problem(id))
        return Problem.from_response(result)

    @strawberry.field(description="A reading plan with its ordered items and its problem.")
    async def reading_plan(self, info: Info, id: strawberry.ID) -> Optional[ReadingPlan]:
        context: GraphQLContext = info.context

        async def load():
            plan = await context.reading_plans.get_reading_plan(id)
            plan.problem = await context.problems.get_problem(
                plan.problem_id, include_reading_plan=False
            )
            return plan

        result = await run_operation(info, "reading plan lookup", load())
        return ReadingPlan.from_response(result)

    @strawberry.field(description="Browse verses, optionally by book and chapter.")
    async def verses(
        self,
        info: Info,
        book: Optional[str] = None,
        chapter: Optional[int] = None,
    ) -> List[Verse]:
        result = await run_operation(
            info,
            "verse browse",
            info.context.verses.list_verses(book=book, chapter=chapter),
        )
        return [Verse.from_response(verse) for verse in result]


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Register a new user.")
    async def create_user(
        self, info: Info, username: str, email: str, password: str
    ) -> Optional[User]:
        result = await run_operation(
            info,
            "user creation",
            info.context.users.create_user(username=username, email=email, password=password),
            commit=True,
        )
        return User.from_response(result)

    @strawberry.mutation(description="Describe a new problem owned by the authenticated caller.")
    async def create_problem(
        self,
        info: Info,
        title: str,
        description: str,
        context: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Optional[Problem]:
        ctx: GraphQLContext = info.context

        async def create():
            if ctx.user_id is None:
                raise AuthenticationError()
            return await ctx.problems.create_problem(
                user_id=ctx.user_id,
                title=title,
                description=description,
                context=context,
                category=category,
            )

        result = await run_operation(info, "problem creation", create(), commit=True)
        return Problem.from_response(result)

    @strawberry.mutation(description="Set the read flag of one verse in a reading plan.")
    async def mark_verse_as_read(
        self,
        info: Info,
        reading_plan_id: strawberry.ID,
        verse_id: strawberry.ID,
        is_read: bool,
    ) -> Optional[ReadingPlanItem]:
        result = await run_operation(
            info,
            "reading progress update",
            info.context.reading_plans.mark_verse_as_read(reading_plan_id, verse_id, is_read),
            commit=True,
        )
        return ReadingPlanItem.from_response(result)

    @strawberry.mutation(description="Generate Biblical advice for a problem and store it.")
    async def generate_advice(self, info: Info, problem_id: strawberry.ID) -> Optional[Problem]:
        result = await run_operation(
            info,
            "advice generation",
            info.context.problems.generate_advice(problem_id),
            commit=True,
        )
        return Problem.from_response(result)

    @strawberry.mutation(description="Rate the advice on one of the caller's problems.")
    async def submit_feedback(
        self,
        info: Info,
        problem_id: strawberry.ID,
        rating: int,
        feedback_text: Optional[str] = None,
        is_helpful: Optional[bool] = None,
    ) -> Optional[Feedback]:
        ctx: GraphQLContext = info.context

        async def submit():
            if ctx.user_id is None:
                raise AuthenticationError()
            return await ctx.feedback.submit_feedback(
                user_id=ctx.user_id,
                problem_id=problem_id,
                rating=rating,
                feedback_text=feedback_text,
                is_helpful=is_helpful,
            )

        result = await run_operation(info, "feedback submission", submit(), commit=True)
        return Feedback.from_response(result)


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    # A factory, so each operation gets its own extension instance
    extensions=[lambda: MaskErrors(should_mask_error=should_mask_error)],
)
