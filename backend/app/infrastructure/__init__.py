"""Infrastructure Layer — persistence gateway, broadcast hub and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core decision logic (lifecycle, guard)
    - Every external failure is mapped to a typed WheelhouseError subclass

Design Decisions:
    - Thin wrappers implementing core/repository_protocols.py
"""
