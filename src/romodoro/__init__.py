"""Romodoro - a terminal focus timer with persistent sessions."""

__version__ = "0.3.0"
