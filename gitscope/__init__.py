"""gitscope - Interactive git history browser."""

__version__ = "0.1.0"
