"""Infrastructure Layer — document backends, identity and partner feed clients, logging.

Invariants:
    - Outbound failures are mapped to core/errors.py types (never raw httpx/SQLAlchemy errors)
"""
