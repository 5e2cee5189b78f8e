"""
Adapters — the shim's edges to the operating system.
"""
