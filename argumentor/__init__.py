"""Argumentor: peer debate matchmaking and structured debate engine."""

__version__ = "0.1.0"
