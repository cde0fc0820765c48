"""View-facing helpers that turn domain outcomes into display data.

Modules here depend on domain types only. Transport and orchestration stay in
adapters and use cases.
"""
