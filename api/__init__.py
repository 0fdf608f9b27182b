"""AI Impact Calculator API."""

__version__ = "1.0.0"
