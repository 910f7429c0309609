"""API Layer — FastAPI error handlers and fixed routes.

Invariants:
    - Store and operation routes come from Registry.bind(), never from this package
    - All endpoints return structured JSON responses

Design Decisions:
    - Thin routes; dispatch logic lives in services/
"""
