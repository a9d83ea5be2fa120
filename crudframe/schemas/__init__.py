"""Schemas — pydantic shapes for request validation and response serialization.

Invariants:
    - Request shapes are parsed only through api/validation.py (never by hand in handlers)
    - Response shapes read ORM objects via from_attributes

Design Decisions:
    - One module per resource plus common.py for envelopes and pagination
"""
