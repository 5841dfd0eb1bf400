"""Shared helpers: logging setup and the error hierarchy."""
