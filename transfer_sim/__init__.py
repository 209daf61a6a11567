"""Funds-transfer simulator with phase-by-phase failure injection and rollback."""

__version__ = "0.1.0"
