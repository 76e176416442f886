"""Saving and loading Kwazam games."""
