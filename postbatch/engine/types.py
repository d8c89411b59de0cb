from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from postbatch.request import FetchRequest


@dataclass(frozen=True)
class FetchSuccess:
    request: FetchRequest
    text: str
    duration_s: float

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    request: FetchRequest
    reason: str
    duration_s: float

    @property
    def ok(self) -> bool:
        return False


FetchOutcome = FetchSuccess | FetchFailure


def successes(outcomes: Mapping[FetchRequest, FetchOutcome]) -> dict[FetchRequest, str]:
    return {
        request: outcome.text
        for request, outcome in outcomes.items()
        if isinstance(outcome, FetchSuccess)
    }


class EngineError(Exception):
    """The batch as a whole could not complete.

    `partial` holds the outcomes merged before the failure.
    """

    def __init__(
        self,
        *args: object,
        partial: Mapping[FetchRequest, FetchOutcome] | None = None,
    ) -> None:
        super().__init__(*args)
        self.partial: dict[FetchRequest, FetchOutcome] = dict(partial or {})


class BatchCancelledError(EngineError):
    def __init__(
        self,
        *args: object,
        partial: Mapping[FetchRequest, FetchOutcome] | None = None,
    ) -> None:
        super().__init__(*args, partial=partial)
