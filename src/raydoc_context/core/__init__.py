"""Core infrastructure: configuration and exceptions."""
