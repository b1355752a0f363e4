"""
Solace Backend — Identifier, Input and Deadline Tests
=======================================================

What:  Tests for the small building blocks every operation relies on:
       identifier parsing, mutation input schemas and operation deadlines.
"""

import asyncio
import uuid

import pytest

from solace.exceptions import InvalidIdentifierError, OperationTimeoutError, ValidationError
from solace.identifiers import parse_identifier
from solace.schemas.inputs import ProblemCreate, UserCreate, parse_input
from solace.services.deadline import within_deadline


class TestParseIdentifier:
    def test_string_uuid(self):
        value = uuid.uuid4()

        assert parse_identifier(str(value), "user") == value

    def test_uppercase_and_whitespace(self):
        value = uuid.uuid4()

        assert parse_identifier(f"  {str(value).upper()} ", "problem") == value

    def test_uuid_passes_through(self):
        value = uuid.uuid4()

        assert parse_identifier(value, "verse") is value

    @pytest.mark.parametrize("raw", ["", "123", "not-a-uuid", "1234-5678"])
    def test_malformed(self, raw):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            parse_identifier(raw, "user")

        assert exc_info.value.error_code == "invalid_identifier"
        assert "user" in exc_info.value.message

    def test_non_string(self):
        with pytest.raises(InvalidIdentifierError):
            parse_identifier(42, "user")


class TestInputSchemas:
    def test_user_email_is_normalized(self):
        payload = parse_input(UserCreate, username=" alice ", email=" A@X.Com ", password="password1")

        assert payload.username == "alice"
        assert payload.email == "a@x.com"

    def test_problem_keeps_text_verbatim(self):
        payload = parse_input(ProblemCreate, title=" Stress ", description="Line one\nLine two")

        assert payload.title == " Stress "
        assert payload.description == "Line one\nLine two"

    def test_problem_title_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_input(ProblemCreate, title="x" * 201, description="d")

        assert exc_info.value.field == "title"


class TestWithinDeadline:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def quick():
            return "done"

        assert await within_deadline(quick(), timeout=1, operation="quick thing") == "done"

    @pytest.mark.asyncio
    async def test_expiry_raises_timeout(self):
        with pytest.raises(OperationTimeoutError) as exc_info:
            await within_deadline(asyncio.sleep(5), timeout=0.01, operation="slow thing")

        assert exc_info.value.operation == "slow thing"
        assert exc_info.value.error_code == "timeout"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        async def boom():
            raise ValidationError(message="bad", field="title")

        with pytest.raises(ValidationError):
            await within_deadline(boom(), timeout=1, operation="boom")
