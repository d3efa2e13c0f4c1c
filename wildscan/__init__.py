"""Batch wildcard byte-signature search."""

__version__ = "0.1.0"
