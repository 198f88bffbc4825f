"""Preference-weighted movie ranking."""

__version__ = "0.1.0"
