from enum import Enum


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    APPLICATION = "application"


class RelayState(str, Enum):
    PENDING = "PENDING"
    ATTEMPTING = "ATTEMPTING"
    SUCCEEDED = "SUCCEEDED"
    EXHAUSTED = "EXHAUSTED"
    CANCELLED = "CANCELLED"
