"""Eunoia: a personal journal API."""

__version__ = "1.0.0"
