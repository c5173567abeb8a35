"""Infrastructure Layer — persistence backends and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All file IO wrapped with error mapping (OSError → PersistenceError)
"""
