"""Invoice Dashboard — server-side form handlers for customers and invoices.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
