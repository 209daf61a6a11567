"""Enumeration types for transfer entities."""

from enum import Enum


class Phase(str, Enum):
    """Remote-call phases of a transfer, in execution order."""

    BALANCE_CHECK = "BALANCE_CHECK"
    DEDUCT = "DEDUCT"
    CONFIRM = "CONFIRM"

    @property
    def step_id(self) -> int:
        return PHASE_ORDER.index(self) + 1

    @property
    def label(self) -> str:
        return PHASE_LABELS[self]

    @property
    def progress_message(self) -> str:
        return PHASE_PROGRESS_MESSAGES[self]


class StepStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.COMPLETED, StepStatus.FAILED)


class StatusKind(str, Enum):
    NONE = "none"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class TransferStatus(str, Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PhaseErrorKind(str, Enum):
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    DATABASE_ERROR = "DATABASE_ERROR"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"


class OrchestratorPhase(str, Enum):
    """Lifecycle of the orchestrator across one start() call."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    REJECTED = "REJECTED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


PHASE_ORDER: tuple[Phase, ...] = (Phase.BALANCE_CHECK, Phase.DEDUCT, Phase.CONFIRM)

PHASE_LABELS: dict[Phase, str] = {
    Phase.BALANCE_CHECK: "Check Balance",
    Phase.DEDUCT: "Deduct Amount",
    Phase.CONFIRM: "Confirm Transaction",
}

PHASE_PROGRESS_MESSAGES: dict[Phase, str] = {
    Phase.BALANCE_CHECK: "Checking balance...",
    Phase.DEDUCT: "Deducting amount...",
    Phase.CONFIRM: "Confirming transaction...",
}

# Step transitions allowed within a single attempt
ALLOWED_STEP_TRANSITIONS: dict[StepStatus, frozenset[StepStatus]] = {
    StepStatus.PENDING: frozenset({StepStatus.PROCESSING}),
    StepStatus.PROCESSING: frozenset({StepStatus.COMPLETED, StepStatus.FAILED}),
    StepStatus.COMPLETED: frozenset(),
    StepStatus.FAILED: frozenset(),
}
