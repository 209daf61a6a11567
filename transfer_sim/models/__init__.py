"""Domain models for the transfer simulator."""

from transfer_sim.enums import (
    OrchestratorPhase,
    Phase,
    PhaseErrorKind,
    StatusKind,
    StepStatus,
    TransferStatus,
)
from transfer_sim.models.account import Account
from transfer_sim.models.base import Event
from transfer_sim.models.state import Step, TransactionState
from transfer_sim.models.transfer import TransferRecord, TransferRequest

__all__ = [
    "Account",
    "Event",
    "OrchestratorPhase",
    "Phase",
    "PhaseErrorKind",
    "StatusKind",
    "Step",
    "StepStatus",
    "TransactionState",
    "TransferRecord",
    "TransferRequest",
    "TransferStatus",
]
