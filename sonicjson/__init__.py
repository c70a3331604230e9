"""Exact decimal-to-double conversion and SAX-style handlers that build JSON values."""

__version__ = "0.1.0"

__all__ = ["decimal_atof", "eisel_lemire", "handler", "tables"]