"""Pydantic Schemas — request validation for admin endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies)
    - Domain enums from core/domain_types used for status and type fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
