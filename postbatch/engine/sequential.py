import time
from typing import Sequence

from postbatch.request import FetchRequest

from .base import FetchEngine
from .types import FetchOutcome


class SequentialFetchEngine(FetchEngine):
    def fetch_outcomes(
        self, requests: Sequence[FetchRequest]
    ) -> dict[FetchRequest, FetchOutcome]:
        self.log.info("sequential fetch started, size=%d", len(requests))
        start = time.monotonic()
        outcomes: dict[FetchRequest, FetchOutcome] = {}

        for request in requests:
            outcomes[request] = self._attempt(request)

        failed = sum(1 for outcome in outcomes.values() if not outcome.ok)
        self.log.info(
            "sequential fetch finished in %.0fms, size=%d, failed=%d",
            (time.monotonic() - start) * 1000,
            len(requests),
            failed,
        )
        return outcomes
