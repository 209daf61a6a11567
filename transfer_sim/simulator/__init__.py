"""Simulated remote phases with injectable failure sources."""

from transfer_sim.simulator.outcomes import (
    FixedOutcomeSource,
    OutcomeSource,
    RandomOutcomeSource,
    ScriptedOutcomeSource,
)
from transfer_sim.simulator.phases import (
    BalanceCheckOperation,
    PhaseSimulator,
    PhaseSpec,
    RemoteOperation,
)

__all__ = [
    "BalanceCheckOperation",
    "FixedOutcomeSource",
    "OutcomeSource",
    "PhaseSimulator",
    "PhaseSpec",
    "RandomOutcomeSource",
    "RemoteOperation",
    "ScriptedOutcomeSource",
]
