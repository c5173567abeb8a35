"""Core Layer — pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Functions are pure apart from the documented in-place record mutations

Design Decisions:
    - Functional core separated from imperative shell: repositories in services/
      orchestrate locking and persistence around these functions
"""
