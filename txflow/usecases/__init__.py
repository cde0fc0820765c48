"""Use-case layer for transaction flows.

Each module coordinates domain builders and ports without performing transport
I/O directly; failures surface as ``UseCaseError`` or a failure outcome.
"""
