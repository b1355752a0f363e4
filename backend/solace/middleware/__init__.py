# Middleware package init
"""
Solace Backend — Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Bearer Auth] → [GZip] → [CORS] → Route

    1. Request ID first: everything after it logs with the correlation ID
    2. Logging: measures the full request duration
    3. Bearer Auth: sets request.state.user_id before GraphQL resolvers run
"""
