"""Repository interfaces for Romodoro."""

from .repository import SessionStore

__all__ = ["SessionStore"]
