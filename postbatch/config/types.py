from dataclasses import dataclass, field

from postbatch.request import FetchRequest
from postbatch.transport import TimeoutConfig


@dataclass
class BatchConfig:
    requests: list[FetchRequest]
    engine: str = "sequential"
    parallelism: int | None = None
    charset: str = "utf-8"
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)

    def __iter__(self):
        yield from self.requests

    def __len__(self):
        return len(self.requests)


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
