from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

from postbatch.transport import Transport

from .base import FetchEngine
from .concurrent import ConcurrentFetchEngine
from .sequential import SequentialFetchEngine

log = logging.getLogger(__name__)


class EngineKind(IntEnum):
    SEQUENTIAL = 0
    CONCURRENT = 1


def parse_engine_kind(selector: EngineKind | int | str | None) -> EngineKind:
    """Unknown selectors fall back to SEQUENTIAL."""
    if isinstance(selector, EngineKind):
        return selector

    if isinstance(selector, str):
        name = selector.strip().upper()
        if name in EngineKind.__members__:
            return EngineKind[name]
    elif isinstance(selector, int) and not isinstance(selector, bool):
        try:
            return EngineKind(selector)
        except ValueError:
            pass

    log.debug("unknown engine selector %r, using sequential", selector)
    return EngineKind.SEQUENTIAL


def get_engine(
    selector: EngineKind | int | str | None,
    transport: Transport,
    **options: Any,
) -> FetchEngine:
    kind = parse_engine_kind(selector)
    match kind:
        case EngineKind.CONCURRENT:
            return ConcurrentFetchEngine(transport, **options)
        case _:
            options.pop("parallelism", None)
            return SequentialFetchEngine(transport, **options)
