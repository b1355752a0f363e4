"""
Solace Backend — Operation Deadlines
=====================================

Every GraphQL operation runs under one upper bound (REQUEST_TIMEOUT_SECONDS)
covering its storage queries and outbound calls. Expiry surfaces as
OperationTimeoutError; cancellation of the caller still propagates as
CancelledError.
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from solace.exceptions import OperationTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def within_deadline(awaitable: Awaitable[T], timeout: float, operation: str) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning("%s exceeded its %.1fs deadline", operation, timeout)
        raise OperationTimeoutError(operation=operation, timeout=timeout) from e
