"""
Solace Backend — Verse Service
===============================

What:  Read access to the pre-seeded verses table: single-row lookup by
       identifier and browsing by book / chapter.
Who:   ReadingPlanService resolves every plan item's verse through
       get_verse(); the verses(book, chapter) query uses list_verses().

Browsing Order:
    ORDER BY chapter, verse, so a book filter reads like the printed text.
    Without a book filter verses of different books interleave by chapter;
    book is added as the last sort key only to keep the order deterministic.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from solace.database import storage_errors
from solace.exceptions import NotFoundError
from solace.models.verse import Verse
from solace.schemas.inputs import VerseFilter, parse_input
from solace.schemas.responses import VerseResponse

logger = logging.getLogger(__name__)


class VerseService:
    """Read-only access to the pre-seeded verses table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_verse(self, verse_id: uuid.UUID) -> VerseResponse:
        """
        Raises:
            NotFoundError: No verse with this id (→ not_found)
            DatabaseError: Query execution failed
        """
        with storage_errors("retrieve the verse", verse_id=str(verse_id)):
            result = await self.session.execute(
                select(Verse).where(Verse.id == verse_id)
            )
            verse = result.scalar_one_or_none()

        if verse is None:
            raise NotFoundError(resource="verse", resource_id=str(verse_id))

        return VerseResponse.model_validate(verse)

    async def list_verses(
        self,
        book: Optional[str] = None,
        chapter: Optional[int] = None,
    ) -> List[VerseResponse]:
        """
        Verses matching the optional filters, ordered by chapter then verse.

        An unknown book or chapter is an empty list, not an error.

        Raises:
            ValidationError: chapter is not positive
            DatabaseError: Query execution failed
        """
        filters = parse_input(VerseFilter, book=book, chapter=chapter)

        query = select(Verse)
        if filters.book is not None:
            query = query.where(Verse.book == filters.book)
        if filters.chapter is not None:
            query = query.where(Verse.chapter == filters.chapter)
        query = query.order_by(Verse.chapter.asc(), Verse.verse.asc(), Verse.book.asc())

        with storage_errors("browse verses", book=filters.book, chapter=filters.chapter):
            result = await self.session.execute(query)
            verses = list(result.scalars().all())

        logger.debug(
            "Verse browse book=%s chapter=%s returned %d rows",
            filters.book,
            filters.chapter,
            len(verses),
        )
        return [VerseResponse.model_validate(verse) for verse in verses]
