"""Conversion of database values to Python values, serialization for SQL drivers, and error types."""

__version__ = "0.1.0"

__all__ = ["convert", "errors"]