"""Core Layer — pure game logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, db/ or models/
    - Game functions are pure and deterministic given their inputs (time and RNG are passed in)
    - The one clock read is ErrorContext.timestamp, stamped when an error envelope is built

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
