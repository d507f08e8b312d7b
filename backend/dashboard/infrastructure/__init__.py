"""Infrastructure Layer — database engine, auth, page cache and logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Driver exceptions are mapped to the core error hierarchy here
"""
