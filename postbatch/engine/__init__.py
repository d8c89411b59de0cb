from .base import FetchEngine
from .concurrent import ConcurrentFetchEngine
from .factory import EngineKind, get_engine, parse_engine_kind
from .sequential import SequentialFetchEngine
from .tasks import FetchTask, root_task
from .types import (
    BatchCancelledError,
    EngineError,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
)

__all__ = [
    "FetchEngine",
    "SequentialFetchEngine",
    "ConcurrentFetchEngine",
    "EngineKind",
    "get_engine",
    "parse_engine_kind",
    "FetchTask",
    "root_task",
    "FetchOutcome",
    "FetchSuccess",
    "FetchFailure",
    "EngineError",
    "BatchCancelledError",
]
