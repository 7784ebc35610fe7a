from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol, Sequence

from relaynet.enums import RelayState
from relaynet.errors import ConfigurationError, RelayCancelled, RelayExhausted, RelayFailure
from relaynet.state_machine import validate_transition

DEFAULT_ATTEMPTS = 3
DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_BACKOFF_SECONDS = 1.0


class Transport(Protocol):
    async def submit(self, endpoint: str, payload: str, timeout: float) -> Any: ...


def linear_backoff(failures: int, unit: float = DEFAULT_BACKOFF_SECONDS) -> float:
    """Delay to wait after ``failures`` consecutive failed attempts."""
    if failures < 1:
        return 0.0
    return failures * unit


def _default_chooser() -> Callable[[Sequence[str]], str]:
    return random.Random().choice


@dataclass(frozen=True)
class AttemptRecord:
    index: int
    endpoint: str
    error: RelayFailure | None = None
    delay: float = 0.0


@dataclass(frozen=True)
class RelayResult:
    endpoint: str
    attempts: int
    result: Any = None


@dataclass
class RelayStrategy:
    """Sequential relay loop over randomly drawn endpoints.

    Each attempt picks an endpoint from the full list with ``chooser`` (tried
    and failed endpoints stay eligible), submits the unchanged payload and
    stops on the first success. Every ``RelayFailure`` is retried after a
    linear backoff until ``max_attempts`` is used up.
    """

    endpoints: Sequence[str]
    transport: Transport
    max_attempts: int = DEFAULT_ATTEMPTS
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    backoff_unit: float = DEFAULT_BACKOFF_SECONDS
    chooser: Callable[[Sequence[str]], str] = field(default_factory=_default_chooser)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    cancel_event: asyncio.Event | None = None
    state: RelayState = field(default=RelayState.PENDING, init=False)

    def __post_init__(self) -> None:
        self.endpoints = tuple(self.endpoints)
        if not self.endpoints:
            raise ConfigurationError("at least one RPC endpoint is required")
        if self.max_attempts < 1:
            raise ConfigurationError(f"attempts must be positive, got {self.max_attempts}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    def _cancel_requested(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _cancel(self, attempts: int, last_error: RelayFailure | None) -> RelayCancelled:
        logging.warning("relay cancelled after %d/%d attempts", attempts, self.max_attempts)
        self._transition(RelayState.CANCELLED)
        return RelayCancelled(attempts, last_error)

    def _transition(self, target: RelayState) -> None:
        validate_transition(self.state, target)
        self.state = target

    async def relay(self, payload: str) -> RelayResult:
        self.state = RelayState.PENDING
        last_error: RelayFailure | None = None
        for index in range(1, self.max_attempts + 1):
            if index > 1 and self._cancel_requested():
                raise self._cancel(index - 1, last_error)

            self._transition(RelayState.ATTEMPTING)
            endpoint = self.chooser(self.endpoints)
            logging.info("attempt %d/%d -> %s", index, self.max_attempts, endpoint)
            try:
                result = await self.transport.submit(endpoint, payload, self.timeout)
            except RelayFailure as exc:
                last_error = exc
            else:
                self._transition(RelayState.SUCCEEDED)
                logging.info("relayed successfully via %s", endpoint)
                return RelayResult(endpoint=endpoint, attempts=index, result=result)

            delay = linear_backoff(index, self.backoff_unit) if index < self.max_attempts else 0.0
            record = AttemptRecord(index=index, endpoint=endpoint, error=last_error, delay=delay)
            logging.warning(
                "attempt %d/%d via %s failed: %s", record.index, self.max_attempts, record.endpoint, record.error
            )
            if index < self.max_attempts and self._cancel_requested():
                raise self._cancel(index, last_error)
            if record.delay:
                await self.sleep(record.delay)

        self._transition(RelayState.EXHAUSTED)
        raise RelayExhausted(self.max_attempts, last_error) from last_error
