"""
Solace Backend — Problem Service Tests
========================================

What:  Tests for ProblemService create / get / list / generate_advice.
How:   In-memory SQLite for the read-after-write behavior, a fake advice
       generator for the advice workflow, mocked sessions for failure paths.

What we test:
    ✅ A created problem reads back with identical fields
    ✅ A problem without a plan has reading_plan=None
    ✅ Blank title/description are rejected, unknown owner is NotFound
    ✅ Listing is ordered by creation time
    ✅ Advice is stored only when generation succeeds
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from solace.exceptions import (
    InvalidIdentifierError,
    LLMServiceError,
    NotFoundError,
    OperationTimeoutError,
    ValidationError,
)
from solace.services.problem_service import SUPPORTING_VERSES, ProblemService


class TestCreateProblem:
    """Tests for create_problem."""

    @pytest.mark.asyncio
    async def test_created_problem_reads_back_identically(self, seed, db_session):
        user = await seed.user()
        service = ProblemService(db_session)

        created = await service.create_problem(
            user_id=str(user.id),
            title="Stress at work",
            description="  My manager keeps moving deadlines.  ",
            context="Started a new job in March",
            category="work",
        )
        fetched = await service.get_problem(str(created.id))

        assert fetched.id == created.id
        assert fetched.user_id == user.id
        assert fetched.title == "Stress at work"
        assert fetched.description == "  My manager keeps moving deadlines.  "
        assert fetched.context == "Started a new job in March"
        assert fetched.category == "work"
        assert fetched.advice is None

    @pytest.mark.asyncio
    async def test_optional_fields_default_to_none(self, seed, db_session):
        user = await seed.user()

        created = await ProblemService(db_session).create_problem(
            user_id=user.id, title="Grief", description="Lost my father.", category="  "
        )

        assert created.context is None
        assert created.category is None

    @pytest.mark.asyncio
    async def test_blank_title_rejected_before_storage(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await ProblemService(mock_db_session).create_problem(
                user_id=str(uuid.uuid4()), title="   ", description="Something"
            )

        assert exc_info.value.field == "title"
        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_description_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await ProblemService(mock_db_session).create_problem(
                user_id=str(uuid.uuid4()), title="Loneliness", description=""
            )

        assert exc_info.value.field == "description"

    @pytest.mark.asyncio
    async def test_unknown_owner_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await ProblemService(db_session).create_problem(
                user_id=str(uuid.uuid4()), title="Anxiety", description="Can't sleep."
            )

        assert exc_info.value.resource == "user"


class TestGetProblem:
    """Tests for get_problem."""

    @pytest.mark.asyncio
    async def test_problem_without_plan_has_no_reading_plan(self, seed, db_session):
        problem = await seed.problem(await seed.user())

        result = await ProblemService(db_session).get_problem(str(problem.id))

        assert result.id == problem.id
        assert result.reading_plan is None

    @pytest.mark.asyncio
    async def test_problem_with_plan_includes_items(self, seed, db_session):
        problem = await seed.problem(await seed.user())
        plan = await seed.plan(problem)
        verse = await seed.verse()
        await seed.item(plan, verse, item_order=1)

        result = await ProblemService(db_session).get_problem(problem.id)

        assert result.reading_plan is not None
        assert result.reading_plan.id == plan.id
        assert [item.verse.id for item in result.reading_plan.items] == [verse.id]

    @pytest.mark.asyncio
    async def test_plan_lookup_failure_is_not_swallowed(self, mock_db_session):
        problem = MagicMock(
            id=uuid.uuid4(),
            user_id=uuid.uuid4(),
            title="t",
            description="d",
            context=None,
            category=None,
            created_at=datetime.now(timezone.utc),
            updated_at=None,
            advice=None,
        )
        problem_result = MagicMock()
        problem_result.scalar_one_or_none.return_value = problem
        reading_plans = MagicMock()
        reading_plans.get_plan_for_problem = AsyncMock(
            side_effect=NotFoundError(resource="verse", resource_id="x")
        )
        mock_db_session.execute.return_value = problem_result

        with pytest.raises(NotFoundError):
            await ProblemService(mock_db_session, reading_plans=reading_plans).get_problem(problem.id)

    @pytest.mark.asyncio
    async def test_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await ProblemService(db_session).get_problem(str(uuid.uuid4()))

        assert exc_info.value.resource == "problem"

    @pytest.mark.asyncio
    async def test_invalid_id_fails_before_query(self, mock_db_session):
        with pytest.raises(InvalidIdentifierError):
            await ProblemService(mock_db_session).get_problem("42")

        mock_db_session.execute.assert_not_awaited()


class TestListProblems:
    """Tests for list_problems_for_user."""

    @pytest.mark.asyncio
    async def test_ordered_by_creation_time(self, seed, db_session):
        user = await seed.user()
        other = await seed.user(username="bob", email="b@x.com")
        now = datetime.now(timezone.utc)
        newer = await seed.problem(user, title="Newer", created_at=now)
        older = await seed.problem(user, title="Older", created_at=now - timedelta(days=2))
        await seed.problem(other, title="Not mine")

        result = await ProblemService(db_session).list_problems_for_user(user.id)

        assert [p.id for p in result] == [older.id, newer.id]
        assert all(p.reading_plan is None for p in result)


class TestGenerateAdvice:
    """Tests for the advice workflow."""

    @pytest.mark.asyncio
    async def test_advice_is_generated_and_stored(self, seed, db_session, advice_generator):
        problem = await seed.problem(await seed.user(), description="I feel overwhelmed.")
        service = ProblemService(db_session, advice_generator=advice_generator)

        result = await service.generate_advice(str(problem.id))

        assert result.advice == advice_generator.advice
        assert result.updated_at is not None
        description, verses = advice_generator.calls[0]
        assert description == "I feel overwhelmed."
        assert verses == list(SUPPORTING_VERSES)

        stored = await service.get_problem(problem.id)
        assert stored.advice == advice_generator.advice

    @pytest.mark.asyncio
    async def test_failed_generation_leaves_problem_untouched(self, seed, db_session, advice_generator):
        problem = await seed.problem(await seed.user())
        advice_generator.error = LLMServiceError(message="upstream down", status=502)
        service = ProblemService(db_session, advice_generator=advice_generator)

        with pytest.raises(LLMServiceError):
            await service.generate_advice(problem.id)

        stored = await service.get_problem(problem.id)
        assert stored.advice is None
        assert stored.updated_at is None

    @pytest.mark.asyncio
    async def test_timeout_kind_is_preserved(self, seed, db_session, advice_generator):
        problem = await seed.problem(await seed.user())
        advice_generator.error = OperationTimeoutError(operation="advice generation", timeout=30)

        with pytest.raises(OperationTimeoutError):
            await ProblemService(db_session, advice_generator=advice_generator).generate_advice(problem.id)

    @pytest.mark.asyncio
    async def test_unknown_problem_does_not_call_generator(self, db_session, advice_generator):
        with pytest.raises(NotFoundError):
            await ProblemService(db_session, advice_generator=advice_generator).generate_advice(
                str(uuid.uuid4())
            )

        assert advice_generator.calls == []

    @pytest.mark.asyncio
    async def test_without_generator(self, mock_db_session):
        with pytest.raises(LLMServiceError):
            await ProblemService(mock_db_session).generate_advice(str(uuid.uuid4()))
