"""ORM Models — SQLAlchemy declarative models for persisted items.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality (ADR: ExMA max 3-4 files to understand a feature)
    - All models imported here so Base.metadata is complete before create_all() runs
"""

from crudserve.models.stored_item import StoredItem  # noqa: F401
