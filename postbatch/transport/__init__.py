from .client import HttpTransport
from .types import (
    TimeoutConfig,
    Transport,
    TransportDecodeError,
    TransportError,
    TransportTimeoutError,
)

__all__ = [
    "HttpTransport",
    "TimeoutConfig",
    "Transport",
    "TransportError",
    "TransportTimeoutError",
    "TransportDecodeError",
]
