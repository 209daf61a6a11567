"""Account generator for the simulated bank account."""

from datetime import datetime
from decimal import Decimal

from transfer_sim.generators.base import BaseGenerator
from transfer_sim.models import Account


class AccountGenerator(BaseGenerator):
    """Open the single account the simulator operates on."""

    BANK_CODES = {
        "001": "First National",
        "033": "Harbor Savings",
        "237": "Union Trust",
        "341": "Pioneer Bank",
    }

    def generate(
        self,
        initial_balance: Decimal = Decimal("1000.00"),
        holder_name: str | None = None,
    ) -> Account:
        """Generate an account.

        Parameters
        ----------
        initial_balance : Decimal
            Opening balance.
        holder_name : str | None
            Account holder; a Faker name when omitted.

        Returns
        -------
        Account
            Generated account.
        """
        if initial_balance < 0:
            raise ValueError(f"Initial balance must not be negative, got {initial_balance}")

        digits = "".join(str(self.rng.randint(0, 9)) for _ in range(6))
        return Account(
            account_id=self.fake.uuid4(),
            holder_name=holder_name or self.fake.name(),
            bank_code=self.rng.choice(list(self.BANK_CODES.keys())),
            branch=f"{self.rng.randint(1, 9999):04d}",
            account_number=f"{digits}-{self._check_digit(digits)}",
            balance=initial_balance,
            created_at=datetime.now(),
        )

    @staticmethod
    def _check_digit(digits: str) -> int:
        """Mod-10 check digit with alternating 2/1 weights."""
        total = 0
        for i, ch in enumerate(reversed(digits)):
            product = int(ch) * (2 if i % 2 == 0 else 1)
            total += product // 10 + product % 10
        return (10 - total % 10) % 10
