"""Nexus Crusher - League champion select companion."""

__version__ = "0.1.0"
