"""Service layer for Romodoro."""
