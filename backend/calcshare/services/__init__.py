"""Services Layer — repositories and identity resolution (the imperative shell).

Invariants:
    - Services own locking and persistence; core/ stays pure
    - Routes reach services only through api/dependencies.py
"""
