"""Shell variables, expansion, command-line tokenizing and built-in commands."""

__version__ = "0.1.0"
__all__ = ["builtin_commands", "environment", "expansion", "lexer"]