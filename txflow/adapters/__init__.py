"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (ledger node REST,
    pinning backend REST, and offline test doubles) used by use cases.

Dependencies:
    REST submodules depend on ``requests``; mocks depend only on domain types.

Call context:
    Imported by ``txflow.app.main`` for runtime wiring and by tests for mocks
    and transport-level behavior verification.
"""
