"""Services Layer — record helpers and per-domain operations over an AsyncSession.

Invariants:
    - Services raise TradeDeskError subclasses (core/errors.py), never HTTPException
    - Services log through core.api_context helpers, which are no-ops outside a request

Design Decisions:
    - One service module per admin domain; generic CRUD lives in records.py only
"""
