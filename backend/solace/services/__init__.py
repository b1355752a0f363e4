# Services package init
"""
Solace Backend — Services Layer
================================

What:  Domain logic between the GraphQL resolvers and the database.
How:   Each service is constructed per request with that request's
       AsyncSession; collaborators are passed in so tests can replace them.

Service Inventory:
    - VerseService:        verse lookup by id
    - ReadingPlanService:  plan/item assembly, mark-verse-as-read
    - ProblemService:      problem create/read/list, advice workflow
    - UserService:         user create/read
    - AdviceGenerator (abstract) / OpenRouterService: advice text generation
    - auth_service:        password hashing, bearer-token verification
    - deadline:            per-operation time limit
"""
