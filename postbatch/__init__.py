from .engine import (
    BatchCancelledError,
    ConcurrentFetchEngine,
    EngineError,
    EngineKind,
    FetchEngine,
    SequentialFetchEngine,
    get_engine,
)
from .request import FetchRequest
from .transport import HttpTransport, TimeoutConfig, TransportError

__all__ = [
    "BatchCancelledError",
    "ConcurrentFetchEngine",
    "EngineError",
    "EngineKind",
    "FetchEngine",
    "FetchRequest",
    "HttpTransport",
    "SequentialFetchEngine",
    "TimeoutConfig",
    "TransportError",
    "get_engine",
]
