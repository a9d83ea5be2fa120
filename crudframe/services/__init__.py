"""Services Layer — business rules, authorization decisions, orchestration.

Invariants:
    - Services receive validated data and a resolved Session, never a request
    - Rule violations raise StructuredError via core/errors constructors; no HTTP status
      numbers appear here
    - Ownership/role checks happen after loading the resource and before any mutating call

Design Decisions:
    - One service per resource, dependencies injected as protocol-typed collaborators
"""
