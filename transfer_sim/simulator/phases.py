"""Simulated remote operations backing the three transfer phases.

Every operation has the same shape: wait out a fixed latency, then fail at
random against the phase's failure rate, otherwise succeed with a result
string. The balance check additionally verifies funds, but only once the
random draw has passed.

Usage::

    simulator = PhaseSimulator(RandomOutcomeSource(seed=42))
    await simulator.check(Decimal("500"), Decimal("1000.00"))
    await simulator.deduct(Decimal("500"))
    await simulator.confirm()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Awaitable, Callable

from transfer_sim.config import PhaseConfig
from transfer_sim.enums import PHASE_ORDER, Phase
from transfer_sim.exceptions import (
    DatabaseError,
    InsufficientFundsAtCheckError,
    NetworkTimeoutError,
    PhaseError,
    ServiceUnavailableError,
)
from transfer_sim.simulator.outcomes import OutcomeSource, RandomOutcomeSource

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class PhaseSpec:
    """Static description of one remote operation."""

    phase: Phase
    failure_rate: float
    delay_seconds: float
    error: type[PhaseError]
    success_template: str


DEFAULT_TEMPLATES: dict[Phase, str] = {
    Phase.BALANCE_CHECK: "Balance verified: ${balance:.2f}",
    Phase.DEDUCT: "Amount deducted: ${amount:.2f}",
    Phase.CONFIRM: "Transaction complete",
}

DEFAULT_ERRORS: dict[Phase, type[PhaseError]] = {
    Phase.BALANCE_CHECK: ServiceUnavailableError,
    Phase.DEDUCT: DatabaseError,
    Phase.CONFIRM: NetworkTimeoutError,
}


class RemoteOperation:
    """One simulated remote call configured by a PhaseSpec."""

    def __init__(self, spec: PhaseSpec, outcomes: OutcomeSource, sleep: Sleeper) -> None:
        self.spec = spec
        self._outcomes = outcomes
        self._sleep = sleep

    @property
    def phase(self) -> Phase:
        return self.spec.phase

    async def __call__(
        self,
        amount: Decimal | None = None,
        current_balance: Decimal | None = None,
    ) -> str:
        await self._sleep(self.spec.delay_seconds)

        if self._outcomes.should_fail(self.phase, self.spec.failure_rate):
            logger.debug("%s: injected failure (rate=%.2f)", self.phase.value, self.spec.failure_rate)
            raise self.spec.error()

        self._verify(amount, current_balance)
        return self.spec.success_template.format(amount=amount, balance=current_balance)

    def _verify(self, amount: Decimal | None, current_balance: Decimal | None) -> None:
        """Deterministic checks run after the random draw passes."""


class BalanceCheckOperation(RemoteOperation):
    """Balance check: also fails when the balance does not cover the amount."""

    def _verify(self, amount: Decimal | None, current_balance: Decimal | None) -> None:
        if amount is None or current_balance is None:
            raise ValueError("Balance check needs both amount and current balance")
        if current_balance < amount:
            raise InsufficientFundsAtCheckError()


class PhaseSimulator:
    """The three simulated remote operations of a transfer.

    Parameters
    ----------
    outcomes : OutcomeSource | None
        Decides random failures; defaults to an unseeded RandomOutcomeSource.
    config : PhaseConfig | None
        Failure rates and latency; defaults to the stock 0.20/0.15/0.10 at 1500 ms.
    sleep : Sleeper
        Coroutine used to wait out the latency (``asyncio.sleep``).
    """

    def __init__(
        self,
        outcomes: OutcomeSource | None = None,
        config: PhaseConfig | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.config = config if config is not None else PhaseConfig()
        self.config.validate()
        self.outcomes = outcomes if outcomes is not None else RandomOutcomeSource()
        self.operations: dict[Phase, RemoteOperation] = {
            phase: self._build(phase, sleep) for phase in PHASE_ORDER
        }

    def _build(self, phase: Phase, sleep: Sleeper) -> RemoteOperation:
        spec = PhaseSpec(
            phase=phase,
            failure_rate=self.config.failure_rate(phase),
            delay_seconds=self.config.delay_seconds,
            error=DEFAULT_ERRORS[phase],
            success_template=DEFAULT_TEMPLATES[phase],
        )
        operation_cls = BalanceCheckOperation if phase == Phase.BALANCE_CHECK else RemoteOperation
        return operation_cls(spec, self.outcomes, sleep)

    async def check(self, amount: Decimal, current_balance: Decimal) -> str:
        return await self.operations[Phase.BALANCE_CHECK](amount, current_balance)

    async def deduct(self, amount: Decimal) -> str:
        return await self.operations[Phase.DEDUCT](amount)

    async def confirm(self) -> str:
        return await self.operations[Phase.CONFIRM]()

    async def run(self, phase: Phase, amount: Decimal, current_balance: Decimal) -> str:
        """Dispatch to the operation for ``phase`` with the inputs it takes."""
        if phase == Phase.BALANCE_CHECK:
            return await self.check(amount, current_balance)
        if phase == Phase.DEDUCT:
            return await self.deduct(amount)
        return await self.confirm()
