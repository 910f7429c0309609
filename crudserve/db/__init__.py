"""Database Declarative Base — shared metadata for the SQL store.

Invariants:
    - Single Base for every ORM model

Design Decisions:
    - Kept apart from infrastructure/: models and alembic import Base without pulling in engines
"""
