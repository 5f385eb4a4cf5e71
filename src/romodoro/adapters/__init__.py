"""Storage adapters for Romodoro."""
