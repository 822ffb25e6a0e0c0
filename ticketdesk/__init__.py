"""Ticket reservation backend: SQLite storage for users, tickets and reservations, and the screen logic built on it."""

__version__ = "0.1.0"
__all__ = ["database", "views"]