"""Failure injection for exercising error paths on demand.

Handlers receive a ``FaultInjector`` and call ``maybe_fail`` before touching
storage. Production wiring uses ``NoFaultInjector``; demos and chaos tests
can switch on ``RandomFaultInjector`` through ``CANCEL_FAULT_PROBABILITY``.
"""

import logging
import random
from typing import Protocol

from ipractice.core.errors import SimulatedFailureError

logger = logging.getLogger(__name__)


class FaultInjector(Protocol):
    def maybe_fail(self, operation: str) -> None:
        ...


class NoFaultInjector:
    def maybe_fail(self, operation: str) -> None:
        return None


class RandomFaultInjector:
    """Fail an operation with a fixed probability."""

    def __init__(self, probability: float, rng: random.Random | None = None) -> None:
        if not 0.0 <= probability <= 1.0:
            raise ValueError("Fault probability must be between 0 and 1.")
        self.probability = probability
        self._rng = rng or random.Random()

    def maybe_fail(self, operation: str) -> None:
        if self._rng.random() < self.probability:
            logger.warning("Injected failure for %s (probability=%.2f)", operation, self.probability)
            raise SimulatedFailureError(operation)


def build_fault_injector(probability: float) -> FaultInjector:
    if probability <= 0:
        return NoFaultInjector()
    return RandomFaultInjector(probability)
