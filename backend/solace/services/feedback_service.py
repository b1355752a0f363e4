"""
Solace Backend — Advice Feedback Service
=========================================

What:  Records a user's rating of the advice generated for their problem.
Who:   The submitFeedback GraphQL mutation (caller = verified token subject).

Upsert Semantics:
    At most one feedback row exists per (problem, user). Submitting again
    overwrites rating, text and the helpful flag and sets updated_at; the
    row keeps its id and created_at.

Ownership:
    Only the problem's owner may rate its advice. Someone else's problem is
    reported as not_found, the same as a problem that does not exist.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solace.database import storage_errors
from solace.exceptions import NotFoundError
from solace.identifiers import parse_identifier
from solace.models.feedback import AdviceFeedback
from solace.models.problem import Problem
from solace.schemas.inputs import FeedbackCreate, parse_input
from solace.schemas.responses import FeedbackResponse

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def submit_feedback(
        self,
        user_id: uuid.UUID,
        problem_id: Union[str, uuid.UUID],
        rating: int,
        feedback_text: Optional[str] = None,
        is_helpful: Optional[bool] = None,
    ) -> FeedbackResponse:
        """
        Create or replace the caller's feedback on one of their problems.

        Raises:
            InvalidIdentifierError: Malformed problem id (before any query)
            ValidationError: rating outside 1..5 or text too long
            NotFoundError: No such problem, or it belongs to someone else
            DatabaseError: Query or write failed
        """
        pid = parse_identifier(problem_id, "problem")
        payload = parse_input(
            FeedbackCreate,
            rating=rating,
            feedback_text=feedback_text,
            is_helpful=is_helpful,
        )

        with storage_errors("verify the problem owner", problem_id=str(pid)):
            result = await self.session.execute(
                select(Problem.id).where(Problem.id == pid, Problem.user_id == user_id)
            )
            owned = result.scalar_one_or_none()

        if owned is None:
            raise NotFoundError(resource="problem", resource_id=str(pid))

        with storage_errors("retrieve the feedback", problem_id=str(pid)):
            result = await self.session.execute(
                select(AdviceFeedback).where(
                    AdviceFeedback.problem_id == pid,
                    AdviceFeedback.user_id == user_id,
                )
            )
            feedback = result.scalar_one_or_none()

        now = datetime.now(timezone.utc)
        if feedback is None:
            feedback = AdviceFeedback(
                id=uuid.uuid4(),
                problem_id=pid,
                user_id=user_id,
                rating=payload.rating,
                feedback_text=payload.feedback_text,
                is_helpful=payload.is_helpful,
                created_at=now,
            )
            self.session.add(feedback)
            action = "recorded"
        else:
            feedback.rating = payload.rating
            feedback.feedback_text = payload.feedback_text
            feedback.is_helpful = payload.is_helpful
            feedback.updated_at = now
            action = "updated"

        with storage_errors("save the feedback", problem_id=str(pid)):
            await self.session.flush()

        logger.info(
            "Feedback %s for problem %s (rating=%d)", action, pid, payload.rating
        )
        return FeedbackResponse.model_validate(feedback)
