"""In-memory stores."""

from transfer_sim.store.transfers import TransferHistory

__all__ = ["TransferHistory"]
