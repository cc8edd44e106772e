import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from operator import attrgetter
from typing import Any, NamedTuple

from .errors import DecodeError, FormatError
from .lstat import FileStat
from .units import DEFAULT_BLOCK_SIZE, user_blocks


class Subject(NamedTuple):
    """What a directive reads its value from."""

    stat: FileStat
    name: str
    block_size: int


def _octal(value: int) -> str:
    return f"{value:o}"


def _hex(value: int) -> str:
    return f"{value:x}"


def _local_time(value: int) -> str:
    try:
        return datetime.fromtimestamp(value).isoformat(timespec="seconds")
    except (ValueError, OverflowError, OSError) as e:
        raise DecodeError(f"Timestamp {value} is outside the representable range: {e}") from e


def _optional(value: int | None) -> str:
    return "" if value is None else str(value)


def _size_in_blocks(subject: Subject) -> int:
    return user_blocks(subject.stat.size, subject.block_size)


class Field(Enum):
    """
    Supported stat(1) sequences: letter, accessor and optional transform.
    """

    PERMISSIONS = ("a", attrgetter("stat.permissions"), _octal)
    RAW_MODE = ("f", attrgetter("stat.mode"), _hex)
    FILE_TYPE = ("F", attrgetter("stat.file_type"), None)
    BLOCKS = ("b", attrgetter("stat.blocks"), None)
    LINKS = ("h", attrgetter("stat.nlink"), None)
    INODE = ("i", attrgetter("stat.inode"), None)
    FILE_INDEX = ("I", attrgetter("stat.fileindex"), _optional)
    NAME = ("n", attrgetter("name"), None)
    IO_SIZE = ("o", attrgetter("stat.blksize"), None)
    SIZE = ("s", attrgetter("stat.size"), None)
    SIZE_BLOCKS = ("S", _size_in_blocks, None)
    DEVICE = ("d", attrgetter("stat.device"), None)
    DEVICE_HEX = ("D", attrgetter("stat.device"), _hex)
    GID = ("g", attrgetter("stat.gid"), None)
    UID = ("u", attrgetter("stat.uid"), None)
    MAJOR = ("t", attrgetter("stat.major"), _hex)
    MINOR = ("T", attrgetter("stat.minor"), _hex)
    ACCESS_TIME = ("x", attrgetter("stat.atime"), _local_time)
    ACCESS_EPOCH = ("X", attrgetter("stat.atime"), None)
    MODIFY_TIME = ("y", attrgetter("stat.mtime"), _local_time)
    MODIFY_EPOCH = ("Y", attrgetter("stat.mtime"), None)
    CHANGE_TIME = ("z", attrgetter("stat.ctime"), _local_time)
    CHANGE_EPOCH = ("Z", attrgetter("stat.ctime"), None)

    def __init__(
        self,
        letter: str,
        accessor: Callable[[Subject], object],
        transform: Callable[[Any], str] | None,
    ) -> None:
        self.letter: str = letter
        self.accessor: Callable[[Subject], object] = accessor
        self.transform: Callable[[Any], str] | None = transform

    def extract(self, subject: Subject) -> str:
        raw: object = self.accessor(subject)
        if self.transform is not None:
            return self.transform(raw)
        return str(raw)


FIELDS_BY_LETTER: dict[str, Field] = {field.letter: field for field in Field}

# Known to stat(1) but not derivable from a catalog snapshot
UNIMPLEMENTED: frozenset[str] = frozenset("ABCGmNUwW")

_DIRECTIVE: re.Pattern[str] = re.compile(r"%(?P<left>-?)(?P<width>[0-9]*)(?P<letter>.?)", re.DOTALL)


@dataclass(frozen=True, slots=True)
class Directive:
    field: Field
    width: int
    left: bool

    def render(self, subject: Subject) -> str:
        text: str = self.field.extract(subject)
        if self.left:
            return text.ljust(self.width)
        return text.rjust(self.width)


@dataclass(frozen=True, slots=True)
class FormatSpec:
    parts: tuple[str | Directive, ...]
    block_size: int = DEFAULT_BLOCK_SIZE

    def render(self, file_stat: FileStat, name: str) -> str:
        subject: Subject = Subject(stat=file_stat, name=name, block_size=self.block_size)
        return "".join(part if isinstance(part, str) else part.render(subject) for part in self.parts)


def unescape(template: str) -> str:
    return template.replace("\\n", "\n").replace("\\t", "\t")


def compile_format(template: str, block_size: int = DEFAULT_BLOCK_SIZE) -> FormatSpec:
    """
    Compile a stat(1) style template such as ``"%9s %n"``.

    Raises
    ------
    FormatError
        On the first sequence that is unimplemented or unknown, before
        anything is rendered.
    """
    text: str = unescape(template)
    parts: list[str | Directive] = []
    literal: list[str] = []
    position: int = 0

    for match in _DIRECTIVE.finditer(text):
        literal.append(text[position : match.start()])
        position = match.end()

        letter: str = match["letter"]

        if letter == "%" and not match["left"] and not match["width"]:
            literal.append("%")
            continue
        if letter in UNIMPLEMENTED:
            raise FormatError(f"Format sequence %{letter} is not implemented")

        field: Field | None = FIELDS_BY_LETTER.get(letter)
        if field is None:
            raise FormatError(f"Unrecognized format sequence {match.group(0)!r} in {template!r}")

        pending: str = "".join(literal)
        if pending:
            parts.append(pending)
        literal = []
        parts.append(Directive(field=field, width=int(match["width"] or 0), left=bool(match["left"])))

    literal.append(text[position:])
    tail: str = "".join(literal)
    if tail:
        parts.append(tail)

    return FormatSpec(parts=tuple(parts), block_size=block_size)
