from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Sequence

from postbatch.request import FetchRequest
from postbatch.transport import Transport

from .types import FetchFailure, FetchOutcome, FetchSuccess, successes


class FetchEngine(ABC):
    """Runs a batch of independent POST requests against one transport.

    A request whose transport call fails is left out of `fetch_batch`'s
    result; `fetch_outcomes` reports it as a `FetchFailure` instead.
    """

    def __init__(self, transport: Transport, *, logger: logging.Logger | None = None):
        self.transport = transport
        self.log = logger or logging.getLogger(type(self).__module__)

    @abstractmethod
    def fetch_outcomes(
        self, requests: Sequence[FetchRequest]
    ) -> dict[FetchRequest, FetchOutcome]: ...

    def fetch_batch(self, requests: Sequence[FetchRequest]) -> dict[FetchRequest, str]:
        return successes(self.fetch_outcomes(requests))

    def fetch_one(self, request: FetchRequest) -> str | None:
        return self.fetch_batch([request]).get(request)

    def timed_fetch(self, url: str, params: Sequence[tuple[str, str]]) -> str:
        start = time.monotonic()
        text = self.transport.post(url, params)
        elapsed_ms = (time.monotonic() - start) * 1000
        self.log.info("fetched url=%s params=%s in %.0fms", url, list(params), elapsed_ms)
        return text

    def _attempt(self, request: FetchRequest) -> FetchOutcome:
        start = time.monotonic()
        try:
            text = self.timed_fetch(request.url, request.params)
        except Exception as exc:
            duration = time.monotonic() - start
            self.log.error("error while fetching %s: %s", request, exc)
            return FetchFailure(request, str(exc) or type(exc).__name__, duration)
        return FetchSuccess(request, text, time.monotonic() - start)
