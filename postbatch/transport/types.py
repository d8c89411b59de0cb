from dataclasses import dataclass
from typing import Protocol, Sequence

DEFAULT_CONNECTION_REQUEST_TIMEOUT_MS = 5 * 1000
DEFAULT_CONNECT_TIMEOUT_MS = 5 * 1000
DEFAULT_SOCKET_TIMEOUT_MS = 30 * 1000


@dataclass(frozen=True)
class TimeoutConfig:
    """Timeouts in milliseconds.

    connection_request: waiting for a pooled connection
    connect: establishing the connection
    socket: waiting for data once connected
    """

    connection_request_ms: int = DEFAULT_CONNECTION_REQUEST_TIMEOUT_MS
    connect_ms: int = DEFAULT_CONNECT_TIMEOUT_MS
    socket_ms: int = DEFAULT_SOCKET_TIMEOUT_MS

    def __post_init__(self) -> None:
        for name in ("connection_request_ms", "connect_ms", "socket_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")


class Transport(Protocol):
    def post(self, url: str, params: Sequence[tuple[str, str]]) -> str: ...


class TransportError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class TransportTimeoutError(TransportError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class TransportDecodeError(TransportError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
