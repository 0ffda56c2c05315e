"""Core Layer — domain logic with no IO, no async, no DB, no clock reads.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are deterministic: the only mutation is of a RoundState passed in
    - Instants and random sources are always arguments, never read ambiently

Design Decisions:
    - Functional core separated from imperative shell
"""
