"""Infrastructure — database sessions, repositories, password hashing, logging.

Invariants:
    - Everything here does IO or wraps a third-party library
    - Implements the Protocols declared in core/repository_protocols.py
"""
