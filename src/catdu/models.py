from dataclasses import dataclass
from enum import Enum

from .aggregate import Metric
from .selection import DEFAULT_THRESHOLD
from .units import DEFAULT_BLOCK_SIZE


class Payload(Enum):
    NONE = "none"
    LSTAT = "lstat"
    DIGEST = "digest"


@dataclass(frozen=True, slots=True)
class Record:
    directory: str
    filename: str
    payload: str | None


@dataclass(frozen=True, slots=True)
class Job:
    id: int
    name: str
    started_at: int | None
    file_count: int


@dataclass(slots=True)
class DuOptions:
    threshold: int = DEFAULT_THRESHOLD
    block_size: int = DEFAULT_BLOCK_SIZE
    apparent_size: bool = False
    count: bool = False
    separate_dirs: bool = False
    all_files: bool = False
    top_n: int | None = None
    format_template: str | None = None
    root: str | None = None

    @property
    def metric(self) -> Metric:
        if self.count:
            return Metric.COUNT
        if self.apparent_size:
            return Metric.APPARENT
        return Metric.BLOCKS

    @property
    def payload(self) -> Payload:
        if self.metric.needs_stat or self.format_template is not None:
            return Payload.LSTAT
        return Payload.NONE
