"""Services Layer — registry and the generic store/operation dispatchers.

Invariants:
    - Dispatchers hold no state; each endpoint closes over one immutable binding
    - Registration-time checks happen in the registry, request-time checks in dispatchers

Design Decisions:
    - One module per dispatcher for locality (ADR: ExMA no god objects)
"""
