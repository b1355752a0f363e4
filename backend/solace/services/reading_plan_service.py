"""
Solace Backend — Reading Plan Service
======================================

What:  Assembles the nested reading-plan read-model and updates reading
       progress.
Why:   A plan is stored as flat rows (reading_plans, reading_plan_items,
       verses); callers need it as one ordered structure.
Who:   ProblemService (plan of a problem), the readingPlan query and the
       markVerseAsRead mutation.

Assembly Flow:
    reading_plans (by problem_id or id)
        └── reading_plan_items WHERE reading_plan_id ORDER BY item_order
                └── VerseService.get_verse(item.verse_id)   (per item)

    A verse that cannot be resolved fails the whole assembly: callers never
    see a plan with holes in it.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solace.database import storage_errors
from solace.exceptions import NotFoundError
from solace.identifiers import parse_identifier
from solace.models.reading_plan import ReadingPlan, ReadingPlanItem
from solace.schemas.responses import (
    ReadingPlanItemResponse,
    ReadingPlanResponse,
    VerseResponse,
)
from solace.services.verse_service import VerseService

logger = logging.getLogger(__name__)


class ReadingPlanService:
    """
    Responsibilities:
        - get_items(): ordered items of a plan, verses resolved
        - get_plan_for_problem(): a problem's plan, or None when it has none
        - get_reading_plan(): a plan by its own id
        - mark_verse_as_read(): flip the read flag of one item
    """

    def __init__(self, session: AsyncSession, verses: Optional[VerseService] = None):
        self.session = session
        self.verses = verses or VerseService(session)

    async def get_items(self, reading_plan_id: uuid.UUID) -> List[ReadingPlanItemResponse]:
        """
        Returns the plan's items in ascending item_order.

        An empty list means the plan exists but has no items yet; whether
        the plan exists at all is decided one layer up.

        Raises:
            NotFoundError: An item references a verse that does not exist
            DatabaseError: Query execution failed
        """
        with storage_errors("retrieve reading plan items", reading_plan_id=str(reading_plan_id)):
            result = await self.session.execute(
                select(ReadingPlanItem)
                .where(ReadingPlanItem.reading_plan_id == reading_plan_id)
                .order_by(ReadingPlanItem.item_order.asc())
            )
            rows = list(result.scalars().all())

        # A missing verse fails the whole plan with not_found; items are never
        # silently dropped
        items = []
        for row in rows:
            verse = await self.verses.get_verse(row.verse_id)
            items.append(self._item_response(row, verse))
        return items

    async def get_plan_for_problem(self, problem_id: uuid.UUID) -> Optional[ReadingPlanResponse]:
        """
        Returns the problem's plan with its items, or None if the problem has
        no plan. "No plan" is a normal state, not an error; every other
        failure propagates.
        """
        with storage_errors("retrieve the reading plan", problem_id=str(problem_id)):
            result = await self.session.execute(
                select(ReadingPlan).where(ReadingPlan.problem_id == problem_id)
            )
            plan = result.scalar_one_or_none()

        if plan is None:
            logger.debug("Problem %s has no reading plan", problem_id)
            return None

        items = await self.get_items(plan.id)
        return self._plan_response(plan, items)

    async def get_reading_plan(self, reading_plan_id: Union[str, uuid.UUID]) -> ReadingPlanResponse:
        """
        Raises:
            InvalidIdentifierError: Malformed id (before any query)
            NotFoundError: No plan with this id
            DatabaseError: Query execution failed
        """
        plan_id = parse_identifier(reading_plan_id, "reading plan")

        with storage_errors("retrieve the reading plan", reading_plan_id=str(plan_id)):
            result = await self.session.execute(
                select(ReadingPlan).where(ReadingPlan.id == plan_id)
            )
            plan = result.scalar_one_or_none()

        if plan is None:
            raise NotFoundError(resource="reading plan", resource_id=str(plan_id))

        items = await self.get_items(plan.id)
        return self._plan_response(plan, items)

    async def mark_verse_as_read(
        self,
        reading_plan_id: Union[str, uuid.UUID],
        verse_id: Union[str, uuid.UUID],
        is_read: bool,
    ) -> ReadingPlanItemResponse:
        """
        Sets the read flag of the single item matching (plan, verse).

        Idempotent: applying the same arguments twice succeeds both times and
        leaves the same is_read value.

        Raises:
            InvalidIdentifierError: Either id is malformed (before any query)
            NotFoundError: No item matches the pair
            DatabaseError: Query execution failed, or more than one item
                matched (the pair must identify exactly one row)
        """
        plan_id = parse_identifier(reading_plan_id, "reading plan")
        verse_uuid = parse_identifier(verse_id, "verse")
        log_context = {"reading_plan_id": str(plan_id), "verse_id": str(verse_uuid)}

        # A duplicated pair makes scalar_one_or_none raise MultipleResultsFound,
        # which storage_errors reports as DatabaseError
        with storage_errors("update reading progress", **log_context):
            result = await self.session.execute(
                select(ReadingPlanItem).where(
                    ReadingPlanItem.reading_plan_id == plan_id,
                    ReadingPlanItem.verse_id == verse_uuid,
                )
            )
            item = result.scalar_one_or_none()

            if item is None:
                raise NotFoundError(
                    resource="reading plan item",
                    resource_id=f"{plan_id}/{verse_uuid}",
                    context=log_context,
                )

            item.is_read = is_read
            item.updated_at = datetime.now(timezone.utc)
            await self.session.flush()

        verse = await self.verses.get_verse(item.verse_id)
        logger.info(
            "Reading plan %s item %s marked is_read=%s",
            plan_id,
            item.id,
            is_read,
        )
        return self._item_response(item, verse)

    @staticmethod
    def _item_response(item: ReadingPlanItem, verse: VerseResponse) -> ReadingPlanItemResponse:
        return ReadingPlanItemResponse(
            id=item.id,
            reading_plan_id=item.reading_plan_id,
            verse=verse,
            item_order=item.item_order,
            is_read=item.is_read,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @staticmethod
    def _plan_response(
        plan: ReadingPlan, items: List[ReadingPlanItemResponse]
    ) -> ReadingPlanResponse:
        return ReadingPlanResponse(
            id=plan.id,
            problem_id=plan.problem_id,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
            items=items,
        )
