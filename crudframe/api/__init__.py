"""API Layer — handlers, boundary wrapper, validation adapter, response helpers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every route endpoint is wrapped by boundary.with_http_error
    - Handlers call exactly one service operation and never touch repositories/adapters

Design Decisions:
    - Thin routes delegate to services (ADR: impureim sandwich)
"""
