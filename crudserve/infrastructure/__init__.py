"""Infrastructure Layer — storage collaborators, database engine, logging.

Invariants:
    - Infrastructure implements core protocols; the core never imports it
    - Database failures surface as StoreError subclasses, never raw SQLAlchemy errors

Design Decisions:
    - Stores live here, not in services/: they are collaborators the dispatch core consumes
"""
