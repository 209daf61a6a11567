"""Output sinks for rendering state and auditing transfers."""

from typing import Protocol

from transfer_sim.models import Event
from transfer_sim.sinks.console import ConsoleSink, format_state
from transfer_sim.sinks.json_file import JsonFileSink


class EventSink(Protocol):
    """Anything that accepts transfer events."""

    def write_event(self, event: Event) -> None: ...

    def close(self) -> None: ...


class FanOutSink:
    """Forward each event to several sinks in order."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = list(sinks)

    def write_event(self, event: Event) -> None:
        for sink in self.sinks:
            sink.write_event(event)

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()


__all__ = ["ConsoleSink", "EventSink", "FanOutSink", "JsonFileSink", "format_state"]
