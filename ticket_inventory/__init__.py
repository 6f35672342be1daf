"""Ticket inventory hold-and-purchase service."""

__version__ = "1.0.0"
