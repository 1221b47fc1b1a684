"""Personalized product discovery feed service."""

__version__ = "1.0.0"
