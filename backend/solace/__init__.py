"""
Solace Backend — Application Package Initializer
=================================================

What: Marks the `solace` directory as a Python package.
Why:  Enables module imports like `from solace.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │      GraphQL Surface (Strawberry)   │  ← Operation dispatch, error translation
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Read-model assembly, mutations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services never reach for a global storage handle: each one is constructed
    with the request's AsyncSession (and its collaborators), so tests can hand
    in mocks or an isolated SQLite database.
"""

__version__ = "1.0.0"
