"""Pytest configuration and fixtures."""

import asyncio
from datetime import datetime
from decimal import Decimal
from typing import Callable

import pytest

from transfer_sim.config import PhaseConfig
from transfer_sim.models import Account, TransactionState
from transfer_sim.orchestrator import TransactionOrchestrator
from transfer_sim.simulator import OutcomeSource, PhaseSimulator, ScriptedOutcomeSource


class RecordingSleeper:
    """Stand-in for asyncio.sleep that records requested delays.

    Still yields to the event loop once so other tasks can observe a
    phase in flight.
    """

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_account_id() -> str:
    """Sample account ID."""
    return "acct-test-001"


@pytest.fixture
def account(sample_account_id: str) -> Account:
    """Account opened with the stock 1000.00 balance."""
    return Account(
        account_id=sample_account_id,
        holder_name="Test Holder",
        bank_code="001",
        branch="0001",
        account_number="123456-7",
        balance=Decimal("1000.00"),
        created_at=datetime(2024, 1, 1, 9, 0, 0),
    )


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def make_orchestrator(
    account: Account, sleeper: RecordingSleeper
) -> Callable[..., TransactionOrchestrator]:
    """Build an orchestrator with forced outcomes and no real latency."""

    def _make(outcomes: OutcomeSource | None = None, **kwargs) -> TransactionOrchestrator:
        simulator = PhaseSimulator(
            outcomes=outcomes or ScriptedOutcomeSource.all_succeed(),
            config=PhaseConfig(delay_ms=0),
            sleep=sleeper,
        )
        return TransactionOrchestrator(account, simulator=simulator, **kwargs)

    return _make


@pytest.fixture
def recorded_states() -> list[TransactionState]:
    """Collects snapshots when passed to ``subscribe``."""
    return []
