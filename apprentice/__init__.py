"""Apprentice -- translate requests into cloud CLI commands and run them with confirmation."""

__version__ = "0.1.0"
