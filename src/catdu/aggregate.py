import re
from collections import defaultdict
from enum import Enum

from .lstat import FileStat

ROOT: str = "/"

_DRIVE_ROOT: re.Pattern[str] = re.compile(r"^[A-Za-z]:/$")


class Metric(Enum):
    BLOCKS = "blocks"
    APPARENT = "apparent"
    COUNT = "count"

    @property
    def needs_stat(self) -> bool:
        return self is not Metric.COUNT

    def measure(self, file_stat: FileStat | None) -> int:
        if self is Metric.COUNT:
            return 1

        assert file_stat is not None

        if self is Metric.APPARENT:
            return file_stat.apparent_size
        return file_stat.block_bytes


def is_drive_root(key: str) -> bool:
    return _DRIVE_ROOT.match(key) is not None


def normalize_path(path: str) -> str:
    """Strip trailing slashes, keeping "/" and "X:/" intact."""
    key: str = path.rstrip("/")

    if not key:
        return ROOT
    if is_drive_root(key + "/"):
        return key + "/"
    return key


def parent_path(key: str) -> str:
    head, _, _ = key.rpartition("/")
    return normalize_path(head + "/")


def join_path(key: str, name: str) -> str:
    if key.endswith("/"):
        return key + name
    return key + "/" + name


def is_terminal(key: str) -> bool:
    return key == ROOT or is_drive_root(key)


class PathAggregator:
    """
    Accumulate usage per path from flat (directory, filename) records.

    Each record credits its own directory and, unless directories are kept
    separate, every ancestor up to and including the root. The result is a
    plain sum, so the order records arrive in does not matter.
    """

    def __init__(
        self,
        metric: Metric = Metric.BLOCKS,
        *,
        root: str = ROOT,
        separate_dirs: bool = False,
        include_files: bool = False,
        keep_stats: bool = False,
    ) -> None:
        self.metric: Metric = metric
        self.root: str = normalize_path(root)
        self.separate_dirs: bool = separate_dirs
        self.include_files: bool = include_files
        self.keep_stats: bool = keep_stats

        self.usage: defaultdict[str, int] = defaultdict(int)
        self.stats: dict[str, FileStat] = {}

    @property
    def total(self) -> int:
        return self.usage.get(self.root, 0)

    def accepts(self, directory: str) -> bool:
        key: str = normalize_path(directory)

        if key == self.root or is_terminal(self.root):
            return key.startswith(self.root)
        return key.startswith(self.root + "/")

    def add(self, directory: str, filename: str, file_stat: FileStat | None) -> None:
        amount: int = self.metric.measure(file_stat)
        key: str = normalize_path(directory)

        # An empty filename is the catalog entry of the directory itself
        full_path: str = join_path(key, filename) if filename else key

        if self.include_files and filename:
            self.usage[full_path] += amount

        if self.keep_stats and file_stat is not None:
            self.stats[full_path] = file_stat

        self.usage[key] += amount

        if self.separate_dirs:
            return

        while key != self.root and not is_terminal(key):
            key = parent_path(key)
            self.usage[key] += amount
