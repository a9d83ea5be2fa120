"""Repositories — persistence access only, one class per aggregate.

Invariants:
    - No business rules: ownership, status transitions, and visibility live in services/
    - Every query wrapped in storage_errors(): SQLAlchemy failures leave as StructuredError
    - List queries take a PageWindow (guarded); reference reads take an explicit cap
"""
