"""
Solace Backend — GraphQL Request Context
========================================

One context per HTTP request: the request's AsyncSession and the service
graph built on top of it. Services share the session, so everything a single
operation does lands in one transaction.
"""

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from solace.services.feedback_service import FeedbackService
from solace.services.llm_base import AdviceGenerator
from solace.services.problem_service import ProblemService
from solace.services.reading_plan_service import ReadingPlanService
from solace.services.user_service import UserService
from solace.services.verse_service import VerseService


class GraphQLContext(BaseContext):
    def __init__(
        self,
        session: AsyncSession,
        advice_generator: Optional[AdviceGenerator] = None,
        user_id: Optional[uuid.UUID] = None,
        request_timeout: float = 45.0,
    ):
        super().__init__()
        self.session = session
        self.user_id = user_id
        self.request_timeout = request_timeout

        self.verses = VerseService(session)
        self.reading_plans = ReadingPlanService(session, self.verses)
        self.problems = ProblemService(session, self.reading_plans, advice_generator)
        self.users = UserService(session, self.problems)
        self.feedback = FeedbackService(session)
