"""Database Infrastructure — SQLAlchemy Base, column mixins and session factory.

Invariants:
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL
"""
