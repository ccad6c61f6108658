"""Politikos People Center civic engagement API."""

__version__ = "0.1.0"
