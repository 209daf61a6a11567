"""In-memory history of transfer attempts."""

from collections import Counter
from dataclasses import dataclass, field

from transfer_sim.enums import Phase, TransferStatus
from transfer_sim.exceptions import ReferentialIntegrityError
from transfer_sim.models import TransferRecord


@dataclass
class TransferHistory:
    """Executed attempts for one account, oldest first.

    Rejected requests never reach the phases and are not recorded.
    """

    account_id: str
    records: list[TransferRecord] = field(default_factory=list)
    _by_id: dict[str, int] = field(default_factory=dict)

    def add(self, record: TransferRecord) -> None:
        """Add a record to the history."""
        if record.account_id != self.account_id:
            raise ReferentialIntegrityError(
                f"Transfer {record.transfer_id} belongs to account {record.account_id}, "
                f"not {self.account_id}"
            )
        self._by_id[record.transfer_id] = len(self.records)
        self.records.append(record)

    def get(self, transfer_id: str) -> TransferRecord | None:
        idx = self._by_id.get(transfer_id)
        return None if idx is None else self.records[idx]

    def last(self) -> TransferRecord | None:
        return self.records[-1] if self.records else None

    def completed(self) -> list[TransferRecord]:
        return [r for r in self.records if r.status == TransferStatus.COMPLETED]

    def failed(self) -> list[TransferRecord]:
        return [r for r in self.records if r.status == TransferStatus.FAILED]

    def failures_by_phase(self) -> dict[Phase, int]:
        """Count failed attempts per failing phase."""
        counts = Counter(r.failed_phase for r in self.failed() if r.failed_phase is not None)
        return dict(counts)

    def __len__(self) -> int:
        return len(self.records)
