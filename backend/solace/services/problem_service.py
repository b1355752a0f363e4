"""
Solace Backend — Problem Service
=================================

What:  Create/read of problem records, listing a user's problems, and the
       advice-generation workflow.
Who:   The createProblem / problem / generateAdvice GraphQL operations and
       UserService (listing path).

Advice Flow (generate_advice):
    ┌──────────────┐    ┌────────────────────┐    ┌──────────────────┐
    │ Fetch problem│───▶│ AdviceGenerator    │───▶│ UPDATE problems  │
    │ (description)│    │ (OpenRouter call)  │    │ advice,updated_at│
    └──────────────┘    └────────────────────┘    └──────────────────┘

    The row is written only after the generator returned text, so a failed
    call leaves the problem untouched.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solace.database import storage_errors
from solace.exceptions import LLMServiceError, NotFoundError
from solace.identifiers import parse_identifier
from solace.models.problem import Problem
from solace.models.user import User
from solace.schemas.inputs import ProblemCreate, parse_input
from solace.schemas.responses import ProblemResponse
from solace.services.llm_base import AdviceGenerator
from solace.services.reading_plan_service import ReadingPlanService

logger = logging.getLogger(__name__)


# Placeholder supporting verses for every advice request.
# TODO: select verses relevant to the problem once verse embeddings are seeded.
SUPPORTING_VERSES = (
    "Philippians 4:6-7 - Do not be anxious about anything, but in every situation, "
    "by prayer and petition, with thanksgiving, present your requests to God. And the "
    "peace of God, which transcends all understanding, will guard your hearts and your "
    "minds in Christ Jesus.",
    "Jeremiah 29:11 - For I know the plans I have for you, declares the Lord, plans to "
    "prosper you and not to harm you, plans to give you hope and a future.",
    "Matthew 11:28-30 - Come to me, all you who are weary and burdened, and I will give "
    "you rest. Take my yoke upon you and learn from me, for I am gentle and humble in "
    "heart, and you will find rest for your souls. For my yoke is easy and my burden is "
    "light.",
)


class ProblemService:
    """
    Responsibilities:
        - create_problem(): validated insert owned by an existing user
        - get_problem(): single problem with its reading plan (if any)
        - list_problems_for_user(): a user's problems, oldest first
        - generate_advice(): AI advice persisted onto the problem
    """

    def __init__(
        self,
        session: AsyncSession,
        reading_plans: Optional[ReadingPlanService] = None,
        advice_generator: Optional[AdviceGenerator] = None,
    ):
        self.session = session
        self.reading_plans = reading_plans or ReadingPlanService(session)
        self.advice_generator = advice_generator

    async def create_problem(
        self,
        user_id: Union[str, uuid.UUID],
        title: str,
        description: str,
        context: Optional[str] = None,
        category: Optional[str] = None,
    ) -> ProblemResponse:
        """
        Insert a new problem with a fresh UUID and the current UTC time.

        Raises:
            ValidationError: Empty title or description
            InvalidIdentifierError: Malformed owner id
            NotFoundError: The owning user does not exist
            DatabaseError: Insert failed
        """
        payload = parse_input(
            ProblemCreate,
            title=title,
            description=description,
            context=context,
            category=category,
        )
        owner_id = parse_identifier(user_id, "user")
        await self._ensure_user_exists(owner_id)

        problem = Problem(
            id=uuid.uuid4(),
            user_id=owner_id,
            title=payload.title,
            description=payload.description,
            context=payload.context,
            category=payload.category,
            created_at=datetime.now(timezone.utc),
        )

        with storage_errors("save the problem", user_id=str(owner_id)):
            self.session.add(problem)
            await self.session.flush()

        logger.info("Problem %s created for user %s", problem.id, owner_id)
        return self._problem_response(problem)

    async def get_problem(
        self,
        problem_id: Union[str, uuid.UUID],
        include_reading_plan: bool = True,
    ) -> ProblemResponse:
        """
        Fetch one problem and attach its reading plan when it has one.

        A problem without a plan comes back with reading_plan=None. Any other
        failure while assembling the plan (missing verse, storage error) is
        reported to the caller.

        Raises:
            InvalidIdentifierError: Malformed id (before any query)
            NotFoundError: No problem with this id
            DatabaseError: Query execution failed
        """
        pid = parse_identifier(problem_id, "problem")
        problem = await self._fetch_problem(pid)
        response = self._problem_response(problem)

        if include_reading_plan:
            response.reading_plan = await self.reading_plans.get_plan_for_problem(pid)

        return response

    async def list_problems_for_user(self, user_id: uuid.UUID) -> List[ProblemResponse]:
        """Every problem owned by the user, ordered by creation time ascending."""
        with storage_errors("retrieve the user's problems", user_id=str(user_id)):
            result = await self.session.execute(
                select(Problem)
                .where(Problem.user_id == user_id)
                .order_by(Problem.created_at.asc(), Problem.id.asc())
            )
            problems = list(result.scalars().all())

        return [self._problem_response(problem) for problem in problems]

    async def generate_advice(self, problem_id: Union[str, uuid.UUID]) -> ProblemResponse:
        """
        Generate advice for a problem and persist it with a new updated_at.

        Raises:
            InvalidIdentifierError: Malformed id (before any query)
            NotFoundError: No problem with this id
            LLMServiceError: Generation failed or produced no content
            OperationTimeoutError: The generator did not answer in time
            DatabaseError: Reading or updating the problem failed
        """
        if self.advice_generator is None:
            raise LLMServiceError(message="Advice generation is not configured on this server.")

        pid = parse_identifier(problem_id, "problem")
        problem = await self._fetch_problem(pid)

        advice = await self.advice_generator.generate_advice(
            problem.description,
            SUPPORTING_VERSES,
        )

        with storage_errors("save the advice", problem_id=str(pid)):
            problem.advice = advice
            problem.updated_at = datetime.now(timezone.utc)
            await self.session.flush()

        logger.info("Advice stored for problem %s (%d chars)", pid, len(advice))

        response = self._problem_response(problem)
        response.reading_plan = await self.reading_plans.get_plan_for_problem(pid)
        return response

    async def _fetch_problem(self, problem_id: uuid.UUID) -> Problem:
        with storage_errors("retrieve the problem", problem_id=str(problem_id)):
            result = await self.session.execute(
                select(Problem).where(Problem.id == problem_id)
            )
            problem = result.scalar_one_or_none()

        if problem is None:
            raise NotFoundError(resource="problem", resource_id=str(problem_id))
        return problem

    async def _ensure_user_exists(self, user_id: uuid.UUID) -> None:
        with storage_errors("verify the problem owner", user_id=str(user_id)):
            result = await self.session.execute(
                select(User.id).where(User.id == user_id)
            )
            found = result.scalar_one_or_none()

        if found is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

    @staticmethod
    def _problem_response(problem: Problem) -> ProblemResponse:
        return ProblemResponse(
            id=problem.id,
            user_id=problem.user_id,
            title=problem.title,
            description=problem.description,
            context=problem.context,
            category=problem.category,
            created_at=problem.created_at,
            updated_at=problem.updated_at,
            advice=problem.advice,
        )
