"""Liquidation Planner Package — target-proceeds sell planning with a per-user ledger.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
