"""Transaction orchestrator: runs the transfer phases and owns the balance.

A transfer attempt validates the raw amount, resets the steps, then awaits
the balance check, the deduction and the confirmation in strict order. The
deduction is committed to the account as soon as it succeeds; a failure in
the deduction or confirmation phase restores the pre-transfer balance, as does
any other exception or cancellation that escapes an attempt. Only
one attempt runs at a time.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable

from transfer_sim.config import SimulatorConfig
from transfer_sim.enums import (
    PHASE_ORDER,
    OrchestratorPhase,
    Phase,
    PhaseErrorKind,
    StatusKind,
    StepStatus,
    TransferStatus,
)
from transfer_sim.exceptions import (
    PhaseError,
    TransferInProgressError,
    TransferRejectedError,
)
from transfer_sim.generators import AccountGenerator
from transfer_sim.models import (
    Account,
    Event,
    TransactionState,
    TransferRecord,
    TransferRequest,
)
from transfer_sim.simulator import OutcomeSource, PhaseSimulator, RandomOutcomeSource
from transfer_sim.simulator.phases import Sleeper
from transfer_sim.sinks import EventSink
from transfer_sim.store import TransferHistory

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Transaction completed successfully!"
FAILURE_PREFIX = "Transaction failed"
INTERRUPTED_MESSAGE = "Transfer interrupted"
EVENT_SOURCE = "transfer_sim.orchestrator"

# Phases whose failure restores the pre-transfer balance
ROLLBACK_PHASES = frozenset({Phase.DEDUCT, Phase.CONFIRM})

StateListener = Callable[[TransactionState], None]


def _new_id() -> str:
    return uuid.uuid4().hex


class TransactionOrchestrator:
    """Drive one transfer at a time through the three remote phases.

    Parameters
    ----------
    account : Account
        The account whose balance this orchestrator owns.
    simulator : PhaseSimulator | None
        Remote phases; a default random simulator when None.
    max_transfer_amount : Decimal
        Per-transfer limit checked during validation.
    history : TransferHistory | None
        Where executed attempts are recorded.
    event_sink : EventSink | None
        Receives an Event per state change; write failures are logged only.
    id_factory : Callable[[], str]
        Produces transfer and event IDs.
    """

    def __init__(
        self,
        account: Account,
        simulator: PhaseSimulator | None = None,
        max_transfer_amount: Decimal = Decimal("1000"),
        history: TransferHistory | None = None,
        event_sink: EventSink | None = None,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._account = account
        self._simulator = simulator if simulator is not None else PhaseSimulator()
        self.max_transfer_amount = max_transfer_amount
        self.history = (
            history if history is not None else TransferHistory(account_id=account.account_id)
        )
        self.event_sink = event_sink
        self._id_factory = id_factory
        self._state = TransactionState(balance=account.balance)
        self._listeners: list[StateListener] = []
        self._lifecycle = OrchestratorPhase.IDLE

    @classmethod
    def from_config(
        cls,
        config: SimulatorConfig,
        outcomes: OutcomeSource | None = None,
        sleep: Sleeper = asyncio.sleep,
        event_sink: EventSink | None = None,
    ) -> TransactionOrchestrator:
        """Open an account and wire a simulator from configuration."""
        config.validate()
        account = AccountGenerator(seed=config.seed).generate(
            initial_balance=config.account.initial_balance,
            holder_name=config.account.holder_name,
        )
        simulator = PhaseSimulator(
            outcomes=outcomes if outcomes is not None else RandomOutcomeSource(config.seed),
            config=config.phases,
            sleep=sleep,
        )
        return cls(
            account,
            simulator=simulator,
            max_transfer_amount=config.account.max_transfer_amount,
            event_sink=event_sink,
        )

    # -- read side -----------------------------------------------------------

    @property
    def state(self) -> TransactionState:
        return self._state.snapshot()

    @property
    def balance(self) -> Decimal:
        return self._account.balance

    @property
    def account(self) -> Account:
        return copy.copy(self._account)

    @property
    def lifecycle(self) -> OrchestratorPhase:
        return self._lifecycle

    @property
    def transfer_in_progress(self) -> bool:
        return self._state.transfer_in_progress

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- write side ----------------------------------------------------------

    def set_amount(self, raw_amount: str) -> None:
        """Store the raw amount as typed by the user."""
        self._state.amount_input = raw_amount

    async def start(self, raw_amount: str | None = None) -> TransactionState:
        """Validate and run one transfer attempt.

        Parameters
        ----------
        raw_amount : str | None
            Amount as typed; the stored ``amount_input`` when None.

        Returns
        -------
        TransactionState
            Terminal snapshot (status kind SUCCESS or ERROR).

        Raises
        ------
        TransferInProgressError
            If another attempt has not finished.
        TransferRejectedError
            If the amount fails validation; no step is touched.
        """
        if self._state.transfer_in_progress:
            raise TransferInProgressError("A transfer is already in progress")

        raw = self._state.amount_input if raw_amount is None else raw_amount
        balance_before = self._account.balance

        self._lifecycle = OrchestratorPhase.VALIDATING
        try:
            request = TransferRequest.parse(raw, self.max_transfer_amount, balance_before)
        except TransferRejectedError as exc:
            self._lifecycle = OrchestratorPhase.REJECTED
            logger.warning("Transfer rejected: %s (input=%r)", exc, raw)
            raise

        self._state.amount_input = raw
        return await self._execute(request, balance_before)

    async def _execute(self, request: TransferRequest, balance_before: Decimal) -> TransactionState:
        transfer_id = self._id_factory()
        started_at = datetime.now()
        context = {"transfer_id": transfer_id, "account_id": self._account.account_id}

        self._state.reset_steps()
        self._state.clear_status()
        self._state.transfer_in_progress = True
        self._lifecycle = OrchestratorPhase.RUNNING
        self._notify()
        logger.info(
            "Transfer %s started: amount=%s balance=%s",
            transfer_id,
            request.amount,
            balance_before,
            extra={**context, "amount": request.amount, "balance": balance_before},
        )
        self._publish("transfer.started", transfer_id, {"amount": request.amount, "balance": balance_before})

        failure: PhaseError | None = None
        rolled_back = False
        try:
            for phase in PHASE_ORDER:
                step = self._state.step(phase)
                step.transition(StepStatus.PROCESSING)
                self._state.set_status(phase.progress_message, StatusKind.PROCESSING)
                self._step_changed(transfer_id, phase)

                try:
                    result = await self._simulator.run(phase, request.amount, balance_before)
                except PhaseError as exc:
                    failure = exc
                    step.transition(StepStatus.FAILED)
                    if phase in ROLLBACK_PHASES:
                        self._set_balance(balance_before)
                        rolled_back = True
                        logger.info(
                            "Transfer %s rolled back to %s",
                            transfer_id,
                            balance_before,
                            extra={**context, "phase": phase.value, "balance": balance_before},
                        )
                    self._state.set_status(f"{FAILURE_PREFIX}: {exc}", StatusKind.ERROR)
                    logger.warning(
                        "Transfer %s failed at %s: %s",
                        transfer_id,
                        phase.value,
                        exc,
                        extra={**context, "phase": phase.value},
                    )
                    self._step_changed(transfer_id, phase)
                    break

                step.transition(StepStatus.COMPLETED)
                logger.debug("Transfer %s: %s -> %s", transfer_id, phase.value, result)
                if phase == Phase.DEDUCT:
                    self._set_balance(balance_before - request.amount)
                self._step_changed(transfer_id, phase, result)
            else:
                self._state.set_status(SUCCESS_MESSAGE, StatusKind.SUCCESS)
                self._state.amount_input = ""
                logger.info(
                    "Transfer %s completed: balance=%s",
                    transfer_id,
                    self._account.balance,
                    extra={**context, "balance": self._account.balance},
                )

            self._lifecycle = OrchestratorPhase.FAILED if failure else OrchestratorPhase.SUCCEEDED
            self._record(
                transfer_id,
                request,
                balance_before,
                started_at,
                failed_phase=failure.phase if failure else None,
                error_kind=failure.kind if failure else None,
                rolled_back=rolled_back,
            )
        finally:
            # Not terminal here means something other than a PhaseError escaped a phase
            if not self._state.is_terminal:
                self._abort(transfer_id, request, balance_before, started_at)
            self._state.transfer_in_progress = False
            self._notify()

        return self._state.snapshot()

    def _abort(
        self,
        transfer_id: str,
        request: TransferRequest,
        balance_before: Decimal,
        started_at: datetime,
    ) -> None:
        """Fail the active step and restore the pre-transfer balance."""
        step = self._state.active_step
        if step is not None:
            step.transition(StepStatus.FAILED)
        rolled_back = self._account.balance != balance_before
        if rolled_back:
            self._set_balance(balance_before)
        self._state.set_status(f"{FAILURE_PREFIX}: {INTERRUPTED_MESSAGE}", StatusKind.ERROR)
        self._lifecycle = OrchestratorPhase.FAILED
        logger.error(
            "Transfer %s interrupted; balance restored to %s",
            transfer_id,
            balance_before,
            extra={
                "transfer_id": transfer_id,
                "account_id": self._account.account_id,
                "phase": step.phase.value if step else None,
                "balance": balance_before,
            },
        )
        self._record(
            transfer_id,
            request,
            balance_before,
            started_at,
            failed_phase=step.phase if step else None,
            error_kind=None,
            rolled_back=rolled_back,
        )

    # -- helpers -------------------------------------------------------------

    def _set_balance(self, value: Decimal) -> None:
        self._account.balance = value
        self._account.updated_at = datetime.now()
        self._state.balance = value

    def _record(
        self,
        transfer_id: str,
        request: TransferRequest,
        balance_before: Decimal,
        started_at: datetime,
        failed_phase: Phase | None,
        error_kind: PhaseErrorKind | None,
        rolled_back: bool,
    ) -> None:
        failed = self._state.status_kind == StatusKind.ERROR
        record = TransferRecord(
            transfer_id=transfer_id,
            account_id=self._account.account_id,
            amount=request.amount,
            status=TransferStatus.FAILED if failed else TransferStatus.COMPLETED,
            message=self._state.status_message,
            balance_before=balance_before,
            balance_after=self._account.balance,
            started_at=started_at,
            finished_at=datetime.now(),
            failed_phase=failed_phase,
            error_kind=error_kind,
            rolled_back=rolled_back,
        )
        self.history.add(record)
        event_type = "transfer.failed" if failed else "transfer.completed"
        self._publish(event_type, transfer_id, {"record": record})

    def _step_changed(self, transfer_id: str, phase: Phase, result: str | None = None) -> None:
        self._notify()
        step = self._state.step(phase)
        data = {
            "step_id": step.id,
            "phase": phase,
            "status": step.status,
            "balance": self._state.balance,
            "message": self._state.status_message,
        }
        if result is not None:
            data["result"] = result
        self._publish("transfer.step_changed", transfer_id, data)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state.snapshot())
            except Exception:
                logger.exception("State listener %r failed", listener)

    def _publish(self, event_type: str, transfer_id: str, data: dict) -> None:
        if self.event_sink is None:
            return
        event = Event(
            event_id=self._id_factory(),
            event_type=event_type,
            event_time=datetime.now(),
            source=EVENT_SOURCE,
            subject=transfer_id,
            data=data,
            metadata={"account_id": self._account.account_id},
        )
        try:
            self.event_sink.write_event(event)
        except Exception:
            logger.exception("Failed to publish %s for transfer %s", event_type, transfer_id)
