"""
Entry point for running buildj as a module.

Usage: python -m buildj [ARGS...]
"""

from buildj.cli.parser import main

if __name__ == "__main__":
    main()
