from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchTask:
    """A node of the fetch tree covering request indices start..end (inclusive).

    A task no wider than `threshold + 1` indices is a leaf and runs its
    requests directly; wider tasks split in two halves, the lower half taking
    the extra index on odd widths.
    """

    start: int
    end: int
    threshold: int

    @property
    def name(self) -> str:
        return f"FetchTask_{self.start}_{self.end}"

    def is_leaf(self) -> bool:
        return self.end - self.start <= self.threshold

    def split(self) -> tuple[FetchTask, FetchTask]:
        middle = (self.start + self.end) // 2
        return (
            FetchTask(self.start, middle, self.threshold),
            FetchTask(middle + 1, self.end, self.threshold),
        )

    def indices(self) -> range:
        return range(self.start, self.end + 1)


def root_task(size: int, parallelism: int) -> FetchTask:
    if size < 1:
        raise ValueError("a fetch tree needs at least one request")
    return FetchTask(0, size - 1, size // parallelism)
