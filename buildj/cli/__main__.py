"""
Entry point for running the buildj CLI as a module.

Usage: python -m buildj.cli [ARGS...]
"""

from .parser import main

if __name__ == "__main__":
    main()
