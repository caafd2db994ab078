"""Storefront pages CLI — manage page templates from the terminal."""

__version__ = "0.1.0"
