"""
Operation state and single-flight latches.

Each asynchronous operation exposes its state as one of
IDLE, IN_FLIGHT, SUCCEEDED or FAILED(reason) instead of loose flags.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Dict, Iterator, Optional


class Phase(str, PyEnum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationState:
    phase: Phase = Phase.IDLE
    error: Optional[str] = None

    @property
    def in_flight(self) -> bool:
        return self.phase is Phase.IN_FLIGHT

    @property
    def failed(self) -> bool:
        return self.phase is Phase.FAILED

    @classmethod
    def idle(cls) -> "OperationState":
        return cls()

    @classmethod
    def started(cls) -> "OperationState":
        return cls(Phase.IN_FLIGHT)

    @classmethod
    def succeeded(cls) -> "OperationState":
        return cls(Phase.SUCCEEDED)

    @classmethod
    def failed_with(cls, reason: str) -> "OperationState":
        return cls(Phase.FAILED, reason)


class SingleFlight:
    """
    Boolean latch around one operation.

    A second entry while the first is outstanding is the caller's to
    reject; `run()` itself only tracks state and always releases.
    """

    def __init__(self, name: str):
        self.name = name
        self.state = OperationState.idle()

    @property
    def busy(self) -> bool:
        return self.state.in_flight

    @contextmanager
    def run(self) -> Iterator[None]:
        if self.busy:
            raise RuntimeError(f"{self.name} is already in flight")
        self.state = OperationState.started()
        try:
            yield
        except BaseException as e:
            self.state = OperationState.failed_with(str(e) or type(e).__name__)
            raise
        else:
            self.state = OperationState.succeeded()


class KeyedSingleFlight:
    """
    One latch per key, e.g. per case id.

    Only latches that are in flight or hold a failure are kept; a key whose
    last run succeeded reads as IDLE again.
    """

    def __init__(self, name: str):
        self.name = name
        self._latches: Dict[str, SingleFlight] = {}

    def latch(self, key: str) -> SingleFlight:
        if key not in self._latches:
            self._latches[key] = SingleFlight(f"{self.name}[{key}]")
        return self._latches[key]

    @contextmanager
    def run(self, key: str) -> Iterator[None]:
        latch = self.latch(key)
        with latch.run():
            yield
        if self._latches.get(key) is latch:
            del self._latches[key]

    def __len__(self) -> int:
        return len(self._latches)

    def busy(self, key: str) -> bool:
        latch = self._latches.get(key)
        return latch is not None and latch.busy

    def state(self, key: str) -> OperationState:
        latch = self._latches.get(key)
        return latch.state if latch else OperationState.idle()
