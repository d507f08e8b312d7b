"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes read the form, call one action handler, render its result

Design Decisions:
    - Thin routes delegate to services
"""
