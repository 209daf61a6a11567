"""Base models shared across the simulator."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Standard event envelope for transfer notifications."""

    event_id: str
    event_type: str  # entity.action (e.g., transfer.step_changed)
    event_time: datetime
    source: str  # Component that emitted the event
    subject: str  # Transfer ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
