"""
Solace Backend — GraphQL Error Translation
===========================================

What:  Turns application exceptions into GraphQL errors and decides which
       errors are masked before they reach the client.

Translation:
    SolaceError subclass → GraphQLError(message, extensions={"code": error_code})
        e.g. NotFoundError → {"message": "...", "extensions": {"code": "not_found"}}

Masking (MaskErrors extension):
    - Translated application errors and GraphQL validation/syntax errors are
      returned as-is
    - Anything else (a bug, an unexpected driver exception) is replaced by
      a generic "Unexpected error." message; the original is logged
"""

import logging

from graphql import GraphQLError

from solace.exceptions import DatabaseError, SolaceError
from solace.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


def to_graphql_error(exc: SolaceError) -> GraphQLError:
    rid = request_id_var.get("")
    if isinstance(exc, DatabaseError) or exc.status_code >= 500:
        logger.error("[%s] %s: %s | Context: %s", rid, exc.error_code, exc.message, exc.context)
    else:
        logger.warning("[%s] %s: %s", rid, exc.error_code, exc.message)

    return GraphQLError(
        exc.message,
        original_error=exc,
        extensions={"code": exc.error_code},
    )


def should_mask_error(error: GraphQLError) -> bool:
    original = error.original_error
    if original is None or isinstance(original, (GraphQLError, SolaceError)):
        return False

    logger.error(
        "[%s] Unexpected error in GraphQL operation: %s",
        request_id_var.get(""),
        str(original),
        exc_info=original,
    )
    return True
