"""Core Layer — pure dispatch contracts: errors, domain types, protocols, signatures.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO: everything here is checked or computed in memory

Design Decisions:
    - Functional core separated from imperative shell (ADR: ExMA impureim sandwich)
"""
