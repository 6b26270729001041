"""
buildj command-line interface.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
