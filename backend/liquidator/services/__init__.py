"""Services Layer — orchestrates core rules around repository IO.

Invariants:
    - Services receive repositories via constructor (no direct session creation)
    - Services raise LiquidatorError subclasses; routes never translate them
"""
