from __future__ import annotations

from relaynet.enums import FailureKind


class ConfigurationError(ValueError):
    """Required relay input is missing or invalid; no attempt is made."""


class RelayFailure(Exception):
    kind: FailureKind | None = None

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        if self.kind is None:
            return self.detail
        return f"{self.kind.value} failure: {self.detail}"


class TransportFailure(RelayFailure):
    kind = FailureKind.TRANSPORT


class ProtocolDecodeError(RelayFailure):
    kind = FailureKind.PROTOCOL


class ApplicationError(RelayFailure):
    kind = FailureKind.APPLICATION

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"rpc error {code}: {message}")
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.detail


class RelayExhausted(RuntimeError):
    def __init__(self, attempts: int, last_error: RelayFailure | None) -> None:
        super().__init__(f"all relays failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class RelayCancelled(RuntimeError):
    def __init__(self, attempts: int, last_error: RelayFailure | None) -> None:
        super().__init__(f"relay cancelled after {attempts} attempts")
        self.attempts = attempts
        self.last_error = last_error
