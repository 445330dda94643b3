"""Data-access layer for a library-management application."""

__version__ = "1.0.0"
