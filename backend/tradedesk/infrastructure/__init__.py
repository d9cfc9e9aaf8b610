"""Infrastructure Layer — database, logging, security and mail adapters.

Invariants:
    - Infrastructure never imports from services/
"""
