"""Account model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Account:
    """The single bank account the simulator manages.

    ``balance`` is never negative; only the orchestrator mutates it.
    """

    account_id: str
    holder_name: str
    bank_code: str  # 001, 033, 341, 237
    branch: str  # 4 digits
    account_number: str  # 6 digits + check digit
    balance: Decimal
    created_at: datetime
    updated_at: datetime | None = None
