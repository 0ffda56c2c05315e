"""Pydantic Schemas — validation for REST bodies and inbound WebSocket messages.

Invariants:
    - Schemas validate at system boundary (observer input, API responses)
    - Nothing past a schema sees an unvalidated payload

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
