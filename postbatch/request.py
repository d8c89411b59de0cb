from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping
from urllib.parse import urlencode

Param = tuple[str, str]


@dataclass(frozen=True)
class FetchRequest:
    """One POST request: a target url and its ordered form parameters.

    Instances compare and hash by value, so they can key a result mapping.
    """

    url: str
    params: tuple[Param, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _normalize_params(self.params))

    def param(self, name: str) -> str:
        for key, value in self.params:
            if key == name:
                return value
        return ""

    def __str__(self) -> str:
        if not self.params:
            return self.url
        return f"{self.url}?{urlencode(self.params)}"


def _normalize_params(
    params: Iterable[tuple[str, str]] | Mapping[str, str] | None,
) -> tuple[Param, ...]:
    if params is None:
        return ()
    if isinstance(params, Mapping):
        items = params.items()
    else:
        items = params

    normalized: list[Param] = []
    for item in items:
        name, value = item
        normalized.append((str(name), str(value)))
    return tuple(normalized)
