"""Pydantic Schemas — wire contracts shared by the server and the client.

Invariants:
    - Schemas describe what crosses the HTTP boundary, nothing else
    - Owner-supplied item and request shapes live with their owners, not here

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
