"""Core Layer — error taxonomy, pagination guard, session value, layer contracts.

Invariants:
    - No module in core/ imports from services/, api/, repositories/, infrastructure/, or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
