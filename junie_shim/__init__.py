"""
Junie shim — launcher and version manager for the Junie CLI.
"""

__version__ = "1.0.0"

SHIM_NAME = "junie-shim"
