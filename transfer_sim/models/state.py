"""Step and transaction state models."""

import copy
from dataclasses import dataclass, field
from decimal import Decimal

from transfer_sim.enums import (
    ALLOWED_STEP_TRANSITIONS,
    PHASE_ORDER,
    Phase,
    StatusKind,
    StepStatus,
)
from transfer_sim.exceptions import InvalidStepTransitionError


@dataclass
class Step:
    """One visible step of a transfer attempt."""

    id: int
    label: str
    phase: Phase
    status: StepStatus = StepStatus.PENDING

    @classmethod
    def for_phase(cls, phase: Phase) -> "Step":
        return cls(id=phase.step_id, label=phase.label, phase=phase)

    def transition(self, new_status: StepStatus) -> None:
        """Move to ``new_status`` if the step state machine allows it."""
        if new_status not in ALLOWED_STEP_TRANSITIONS[self.status]:
            raise InvalidStepTransitionError(
                f"Step {self.id} ({self.label}): {self.status.value} -> {new_status.value}"
            )
        self.status = new_status

    def reset(self) -> None:
        self.status = StepStatus.PENDING


def _default_steps() -> list[Step]:
    return [Step.for_phase(phase) for phase in PHASE_ORDER]


@dataclass
class TransactionState:
    """Everything a presentation layer needs to render a transfer.

    Invariants between attempts and during one:
    - at most one step is ``PROCESSING``
    - steps before the active one are ``COMPLETED``, steps after it ``PENDING``
    - on failure only the active step is ``FAILED``
    """

    balance: Decimal
    steps: list[Step] = field(default_factory=_default_steps)
    status_message: str = ""
    status_kind: StatusKind = StatusKind.NONE
    transfer_in_progress: bool = False
    amount_input: str = ""

    def step(self, phase: Phase) -> Step:
        return self.steps[phase.step_id - 1]

    def reset_steps(self) -> None:
        for step in self.steps:
            step.reset()

    def set_status(self, message: str, kind: StatusKind) -> None:
        self.status_message = message
        self.status_kind = kind

    def clear_status(self) -> None:
        self.set_status("", StatusKind.NONE)

    @property
    def active_step(self) -> Step | None:
        for step in self.steps:
            if step.status == StepStatus.PROCESSING:
                return step
        return None

    @property
    def is_terminal(self) -> bool:
        return self.status_kind in (StatusKind.SUCCESS, StatusKind.ERROR)

    def snapshot(self) -> "TransactionState":
        """Return an independent copy safe to hand to renderers."""
        return copy.deepcopy(self)
