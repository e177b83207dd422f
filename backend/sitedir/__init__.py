"""Website Directory Package — internal/external directory sync, merge, and admin writes.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
