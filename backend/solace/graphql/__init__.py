"""
Solace Backend — GraphQL Layer
===============================

What:  The API surface: Strawberry schema, per-request context and the
       translation of application errors into GraphQL errors.
Who:   Mounted at /graphql by routes/graphql.py.
"""

from solace.graphql.schema import schema

__all__ = ["schema"]
