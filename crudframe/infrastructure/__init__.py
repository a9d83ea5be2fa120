"""Infrastructure Layer — database session manager, logging, tokens, outbound adapters.

Invariants:
    - Every foreign failure (SQLAlchemy, httpx, PyJWT) is translated here or returned as None
    - No business rules

Design Decisions:
    - Adapters live beside the database manager: both are "the outside world" to services
"""
