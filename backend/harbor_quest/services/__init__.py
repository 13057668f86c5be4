"""Services Layer — imperative shell around the pure game core.

Invariants:
    - Owns the clock, the RNG and live session state; core functions stay pure
    - Talks to collaborators only through core/repository_protocols.py
"""
