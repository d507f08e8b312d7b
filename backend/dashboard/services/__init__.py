"""Services Layer — form action handlers.

Invariants:
    - One handler class per form family (invoices, accounts)
    - Handlers return ActionResult; they never build HTTP responses

Design Decisions:
    - Cache, sign-in and settings are injected so tests swap them for fakes
"""
