"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Field aliases match the camelCase JSON contract of the web client

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
