"""
Built-in command implementations.

Every module exposes ``run(args, config) -> int`` where args are the
command-line arguments after the program name.
"""
