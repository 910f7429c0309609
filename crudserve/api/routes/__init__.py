"""Route Modules — fixed endpoints that exist whatever the registry holds.

Invariants:
    - Each module defines its own APIRouter with prefix and tags

Design Decisions:
    - Explicit registration in main.py over auto-discovery (ADR: ExMA anti-pattern)
"""
