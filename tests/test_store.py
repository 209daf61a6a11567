"""Tests for TransferHistory."""

from datetime import datetime
from decimal import Decimal

import pytest

from transfer_sim.enums import Phase, PhaseErrorKind, TransferStatus
from transfer_sim.exceptions import ReferentialIntegrityError
from transfer_sim.models import TransferRecord
from transfer_sim.store import TransferHistory


def make_record(
    transfer_id: str,
    account_id: str = "acct-test-001",
    failed_phase: Phase | None = None,
) -> TransferRecord:
    now = datetime(2024, 1, 1, 12, 0, 0)
    failed = failed_phase is not None
    return TransferRecord(
        transfer_id=transfer_id,
        account_id=account_id,
        amount=Decimal("10.00"),
        status=TransferStatus.FAILED if failed else TransferStatus.COMPLETED,
        message="Transaction failed: x" if failed else "Transaction completed successfully!",
        balance_before=Decimal("100.00"),
        balance_after=Decimal("100.00") if failed else Decimal("90.00"),
        started_at=now,
        finished_at=now,
        failed_phase=failed_phase,
        error_kind=PhaseErrorKind.DATABASE_ERROR if failed_phase == Phase.DEDUCT else None,
        rolled_back=failed_phase in (Phase.DEDUCT, Phase.CONFIRM),
    )


class TestTransferHistory:
    """Tests for TransferHistory."""

    def test_empty(self, sample_account_id: str) -> None:
        history = TransferHistory(account_id=sample_account_id)

        assert len(history) == 0
        assert history.last() is None
        assert history.completed() == []
        assert history.failed() == []
        assert history.failures_by_phase() == {}

    def test_add_and_get(self, sample_account_id: str) -> None:
        history = TransferHistory(account_id=sample_account_id)
        record = make_record("tx-1")
        history.add(record)

        assert len(history) == 1
        assert history.get("tx-1") is record
        assert history.get("tx-404") is None
        assert history.last() is record

    def test_rejects_foreign_account(self, sample_account_id: str) -> None:
        history = TransferHistory(account_id=sample_account_id)

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            history.add(make_record("tx-1", account_id="acct-other"))

        assert "acct-other" in str(exc_info.value)
        assert len(history) == 0

    def test_filters_and_counts(self, sample_account_id: str) -> None:
        history = TransferHistory(account_id=sample_account_id)
        history.add(make_record("tx-1"))
        history.add(make_record("tx-2", failed_phase=Phase.DEDUCT))
        history.add(make_record("tx-3", failed_phase=Phase.CONFIRM))
        history.add(make_record("tx-4", failed_phase=Phase.DEDUCT))

        assert [r.transfer_id for r in history.completed()] == ["tx-1"]
        assert [r.transfer_id for r in history.failed()] == ["tx-2", "tx-3", "tx-4"]
        assert history.failures_by_phase() == {Phase.DEDUCT: 2, Phase.CONFIRM: 1}
        assert history.last().transfer_id == "tx-4"
