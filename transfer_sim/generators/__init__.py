"""Generators for simulator fixtures."""

from transfer_sim.generators.account import AccountGenerator

__all__ = ["AccountGenerator"]
