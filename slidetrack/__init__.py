"""Viewing-session tracking and deck analytics service."""
__version__ = "0.1.0"
