"""
Solace Backend — Identifier Parsing
====================================

Every public operation accepts identifiers as strings (GraphQL `ID`). They
are parsed into UUIDs here, before any storage access, so a malformed value
fails fast with InvalidIdentifierError instead of a driver error.
"""

import uuid
from typing import Union

from solace.exceptions import InvalidIdentifierError


def parse_identifier(value: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """
    Args:
        value: A UUID or its string form (any case, with or without braces).
        resource: Resource name used in the error message ("user", "problem").

    Raises:
        InvalidIdentifierError: `value` is not a UUID.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifierError(resource=resource, value=repr(value))
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise InvalidIdentifierError(resource=resource, value=value) from None
