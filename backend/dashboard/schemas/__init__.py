"""Pydantic Schemas — form validation at the HTTP boundary.

Invariants:
    - Schemas validate at system boundary (submitted forms)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are form contracts, models are persistence
"""
