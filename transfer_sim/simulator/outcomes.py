"""Sources of randomness deciding whether a simulated phase fails."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Mapping

from transfer_sim.enums import Phase


class OutcomeSource(ABC):
    """Decides, per phase call, whether the call fails."""

    @abstractmethod
    def should_fail(self, phase: Phase, failure_rate: float) -> bool:
        """Return True when the current call of ``phase`` must fail."""


class RandomOutcomeSource(OutcomeSource):
    """Independent uniform draws against each phase's failure rate.

    Parameters
    ----------
    seed : int | None
        Seed for the private generator; same seed, same sequence of outcomes.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def should_fail(self, phase: Phase, failure_rate: float) -> bool:
        return self._rng.random() < failure_rate


class ScriptedOutcomeSource(OutcomeSource):
    """Forced outcomes for tests and demos.

    ``outcomes`` maps a phase to ``True`` (succeed), ``False`` (fail) or an
    iterable of booleans consumed one per call. Phases without an entry, and
    exhausted sequences, succeed.
    """

    def __init__(self, outcomes: Mapping[Phase, bool | Iterable[bool]] | None = None) -> None:
        self._fixed: dict[Phase, bool] = {}
        self._queued: dict[Phase, deque[bool]] = {}
        for phase, outcome in (outcomes or {}).items():
            if isinstance(outcome, bool):
                self._fixed[phase] = outcome
            else:
                self._queued[phase] = deque(outcome)
        self.calls: list[Phase] = []

    @classmethod
    def all_succeed(cls) -> ScriptedOutcomeSource:
        return cls()

    @classmethod
    def fail_at(cls, phase: Phase) -> ScriptedOutcomeSource:
        """Succeed until ``phase``, which fails."""
        return cls({phase: False})

    def should_fail(self, phase: Phase, failure_rate: float) -> bool:
        self.calls.append(phase)
        if phase in self._fixed:
            return not self._fixed[phase]
        queue = self._queued.get(phase)
        if queue:
            return not queue.popleft()
        return False


class FixedOutcomeSource(OutcomeSource):
    """Compares a constant draw against every failure rate."""

    def __init__(self, draw: float) -> None:
        self.draw = draw

    def should_fail(self, phase: Phase, failure_rate: float) -> bool:
        return self.draw < failure_rate
