# Routes package init
"""
Solace Backend — API Routes Package
====================================

Route Inventory:
    - graphql.py: POST/GET /graphql   (every domain operation)
    - health.py:  GET /health         (service health check)

Design Principle:
    Routes stay THIN. Domain logic lives in the services; the GraphQL
    resolvers only call them and convert the results.
"""
