"""Transfer request and transfer record models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from transfer_sim.enums import Phase, PhaseErrorKind, TransferStatus
from transfer_sim.exceptions import (
    AmountTooLargeError,
    InsufficientFundsError,
    InvalidAmountError,
)


@dataclass(frozen=True)
class TransferRequest:
    """Validated transfer amount."""

    amount: Decimal

    @classmethod
    def parse(
        cls,
        raw_amount: str | None,
        max_amount: Decimal,
        current_balance: Decimal,
    ) -> "TransferRequest":
        """Build a request from raw user input.

        Parameters
        ----------
        raw_amount : str | None
            Amount as typed by the user; may be empty or non-numeric.
        max_amount : Decimal
            Per-transfer limit.
        current_balance : Decimal
            Balance of the account at the time of the request.

        Returns
        -------
        TransferRequest
            Request holding a positive, finite amount.

        Raises
        ------
        InvalidAmountError
            If the input is not a finite number greater than zero.
        AmountTooLargeError
            If the amount exceeds ``max_amount``.
        InsufficientFundsError
            If the amount exceeds ``current_balance``.
        """
        text = (raw_amount or "").strip()
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError() from None

        if not amount.is_finite() or amount <= 0:
            raise InvalidAmountError()
        if amount > max_amount:
            raise AmountTooLargeError(f"Amount cannot exceed ${max_amount.normalize():f}")
        if amount > current_balance:
            raise InsufficientFundsError()
        return cls(amount=amount)


@dataclass
class TransferRecord:
    """Outcome of one executed transfer attempt."""

    transfer_id: str
    account_id: str
    amount: Decimal
    status: TransferStatus
    message: str
    balance_before: Decimal
    balance_after: Decimal
    started_at: datetime
    finished_at: datetime
    failed_phase: Phase | None = None
    error_kind: PhaseErrorKind | None = None
    rolled_back: bool = False
