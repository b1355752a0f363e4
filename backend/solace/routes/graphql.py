"""
Solace Backend — GraphQL Route
===============================

What:  Mounts the Strawberry schema on FastAPI at /graphql.
How:   The context getter is an ordinary FastAPI dependency: it receives the
       request's AsyncSession from get_db_session (rollback on error,
       close always) and the caller identity set by BearerAuthMiddleware.
       Mutations commit inside graphql/schema.run_operation.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import GraphQLRouter

from solace.config import settings
from solace.database import get_db_session
from solace.graphql import schema
from solace.graphql.context import GraphQLContext


async def get_graphql_context(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> GraphQLContext:
    return GraphQLContext(
        session=session,
        advice_generator=getattr(request.app.state, "advice_generator", None),
        user_id=getattr(request.state, "user_id", None),
        request_timeout=settings.request_timeout_seconds,
    )


router = GraphQLRouter(schema, context_getter=get_graphql_context)
