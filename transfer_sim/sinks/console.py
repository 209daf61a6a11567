"""Console sink: renders transfer state for a terminal user."""

import json
import sys
from typing import TextIO

from transfer_sim.enums import StatusKind, StepStatus
from transfer_sim.models import Event, TransactionState
from transfer_sim.sinks.serialization import to_dict

STEP_MARKERS = {
    StepStatus.COMPLETED: "✓",
    StepStatus.FAILED: "✗",
}

STATUS_PREFIXES = {
    StatusKind.PROCESSING: "…",
    StatusKind.SUCCESS: "OK",
    StatusKind.ERROR: "!!",
}


def format_state(state: TransactionState) -> str:
    """Render a state snapshot as plain text."""
    lines = [f"Account Balance: ${state.balance:.2f}", "Transaction Steps"]
    for step in state.steps:
        marker = STEP_MARKERS[step.status] if step.status.is_terminal else str(step.id)
        suffix = " (processing)" if step.status == StepStatus.PROCESSING else ""
        lines.append(f"  [{marker}] {step.label}{suffix}")
    if state.status_kind != StatusKind.NONE and state.status_message:
        lines.append(f"{STATUS_PREFIXES[state.status_kind]} {state.status_message}")
    return "\n".join(lines)


class ConsoleSink:
    """Print state snapshots and events to a text stream."""

    def __init__(
        self,
        stream: TextIO | None = None,
        pretty: bool = True,
        show_events: bool = False,
    ) -> None:
        """Initialize console sink.

        Parameters
        ----------
        stream : TextIO | None
            Output stream (stdout when None).
        pretty : bool
            Pretty-print event JSON.
        show_events : bool
            Print events passed to ``write_event``.
        """
        self.stream = stream
        self.pretty = pretty
        self.show_events = show_events
        self._renders = 0
        self._counts: dict[str, int] = {}

    def _out(self) -> TextIO:
        return self.stream or sys.stdout

    def render(self, state: TransactionState) -> None:
        """Print a snapshot; usable directly as an orchestrator listener."""
        print(f"\n{'-' * 40}", file=self._out())
        print(format_state(state), file=self._out())
        self._renders += 1

    def write_event(self, event: Event) -> None:
        self._counts[event.event_type] = self._counts.get(event.event_type, 0) + 1
        if not self.show_events:
            return
        data = to_dict(event)
        if self.pretty:
            print(json.dumps(data, indent=2, ensure_ascii=False), file=self._out())
        else:
            print(json.dumps(data, ensure_ascii=False), file=self._out())

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'=' * 40}", file=self._out())
        print("Console Sink Summary", file=self._out())
        print("=" * 40, file=self._out())
        print(f"  renders: {self._renders}", file=self._out())
        for event_type, count in self._counts.items():
            print(f"  {event_type}: {count} events", file=self._out())
