"""Services Layer — round controller, tick driver and inbound dispatch.

Invariants:
    - Services orchestrate IO around core pure functions; no decision logic here
      that core could own
    - Inbound dispatch uses explicit dict mapping (no auto-discovery)

Design Decisions:
    - One file per concern for locality
"""
