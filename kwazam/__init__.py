"""Kwazam: rules engine for an 8x5 chess variant."""

__version__ = "0.1.0"
