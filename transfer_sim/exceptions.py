"""Custom exception hierarchy for transfer-sim."""

from transfer_sim.enums import Phase, PhaseErrorKind


class TransferSimError(Exception):
    """Base exception for all transfer-sim errors."""


class TransferRejectedError(TransferSimError):
    """Raised when a transfer request fails validation before any phase runs."""


class InvalidAmountError(TransferRejectedError):
    """Raised when the amount is not a number or is not positive."""

    def __init__(self, message: str = "Please enter a valid amount") -> None:
        super().__init__(message)


class AmountTooLargeError(TransferRejectedError):
    """Raised when the amount exceeds the per-transfer limit."""

    def __init__(self, message: str = "Amount cannot exceed $1000") -> None:
        super().__init__(message)


class InsufficientFundsError(TransferRejectedError):
    """Raised when the amount exceeds the current balance at entry."""

    def __init__(self, message: str = "Amount exceeds current balance") -> None:
        super().__init__(message)


class TransferInProgressError(TransferSimError):
    """Raised when a transfer is started while another one is running."""


class InvalidStepTransitionError(TransferSimError):
    """Raised when a step is moved along an edge its state machine forbids."""


class ConfigurationError(TransferSimError):
    """Raised when configuration is invalid or missing."""


class SinkError(TransferSimError):
    """Raised when a sink operation fails."""


class ReferentialIntegrityError(TransferSimError):
    """Raised when a record references an account the store does not track."""


class PhaseError(TransferSimError):
    """Failure reported by a simulated remote phase.

    Subclasses fix ``phase``, ``kind`` and the default message.
    """

    phase: Phase
    kind: PhaseErrorKind
    default_message: str = ""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ServiceUnavailableError(PhaseError):
    """Balance check service failed at random."""

    phase = Phase.BALANCE_CHECK
    kind = PhaseErrorKind.SERVICE_UNAVAILABLE
    default_message = "Balance check failed - Service temporarily unavailable"


class InsufficientFundsAtCheckError(PhaseError):
    """Balance check found the balance below the requested amount."""

    phase = Phase.BALANCE_CHECK
    kind = PhaseErrorKind.INSUFFICIENT_FUNDS
    default_message = "Insufficient funds"


class DatabaseError(PhaseError):
    """Deduction failed at random."""

    phase = Phase.DEDUCT
    kind = PhaseErrorKind.DATABASE_ERROR
    default_message = "Deduction failed - Database error"


class NetworkTimeoutError(PhaseError):
    """Confirmation failed at random."""

    phase = Phase.CONFIRM
    kind = PhaseErrorKind.NETWORK_TIMEOUT
    default_message = "Transaction confirmation failed - Network timeout"
