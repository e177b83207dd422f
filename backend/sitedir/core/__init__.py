"""Core Layer — pure directory logic: validation, normalization, merge, preview URLs.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are pure and deterministic (repository_protocols only declares IO contracts)
"""
