import stat
from dataclasses import dataclass

from .errors import DecodeError

ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
DIGIT_VALUES: dict[str, int] = {symbol: value for value, symbol in enumerate(ALPHABET)}

# st_blocks is always counted in 512 byte sectors, whatever st_blksize says
SECTOR_SIZE: int = 512

FIELDS: tuple[str, ...] = (
    "device",
    "inode",
    "mode",
    "nlink",
    "uid",
    "gid",
    "rdev",
    "size",
    "blksize",
    "blocks",
    "atime",
    "mtime",
    "ctime",
    "linkfi",
)

FILE_TYPE_LABELS: dict[int, str] = {
    stat.S_IFSOCK: "socket",
    stat.S_IFLNK: "symbolic link",
    stat.S_IFREG: "regular file",
    stat.S_IFBLK: "block device",
    stat.S_IFDIR: "directory",
    stat.S_IFCHR: "character device",
    stat.S_IFIFO: "FIFO",
}


@dataclass(frozen=True, slots=True)
class FileStat:
    device: int
    inode: int
    mode: int
    nlink: int
    uid: int
    gid: int
    rdev: int
    size: int
    blksize: int
    blocks: int
    atime: int
    mtime: int
    ctime: int
    # file index of the first hard link to this file, 0 when not a link
    linkfi: int = 0
    fileindex: int | None = None

    @property
    def file_type(self) -> str:
        return FILE_TYPE_LABELS.get(stat.S_IFMT(self.mode), "UNKNOWN")

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)

    @property
    def apparent_size(self) -> int:
        return self.size

    @property
    def block_bytes(self) -> int:
        return self.blocks * SECTOR_SIZE

    @property
    def major(self) -> int:
        return self.rdev >> 8

    @property
    def minor(self) -> int:
        return self.rdev & 0xFF


def decode_token(token: str) -> int:
    """
    Decode one big-endian base-64 number.

    Every symbol contributes six bits. Values are not bounded to a machine
    word; wide tokens decode to the exact integer they encode.
    """
    value: int = 0
    for symbol in token:
        digit: int | None = DIGIT_VALUES.get(symbol)
        if digit is None:
            raise DecodeError(f"Invalid base-64 symbol {symbol!r} in {token!r}")
        value = (value << 6) + digit
    return value


def decode_lstat(encoded: str) -> FileStat:
    """
    Decode an encoded stat snapshot into a FileStat.

    Parameters
    ----------
    encoded : str
        13 stat fields followed by the hard link file index, plus the file
        index itself when it was recorded (14 or 15 tokens).

    Raises
    ------
    DecodeError
        If the token count is wrong or a token holds a symbol outside the
        alphabet. The message names the complete encoded value.
    """
    tokens: list[str] = encoded.split()

    if len(tokens) not in (len(FIELDS), len(FIELDS) + 1):
        raise DecodeError(f"Expected {len(FIELDS)} or {len(FIELDS) + 1} fields, got {len(tokens)}: {encoded!r}")

    try:
        values: list[int] = [decode_token(token) for token in tokens]
    except DecodeError as e:
        raise DecodeError(f"Corrupt stat value {encoded!r}: {e}") from e

    fileindex: int | None = values[len(FIELDS)] if len(values) > len(FIELDS) else None

    return FileStat(*values[: len(FIELDS)], fileindex=fileindex)
