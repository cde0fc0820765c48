"""Application composition layer for the command line front end.

Wires settings, adapters, and use cases into runnable flows without placing
business logic in the CLI.
"""
