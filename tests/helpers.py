from catdu.lstat import ALPHABET, FIELDS, FileStat


def encode_token(value: int) -> str:
    """Reference encoder: big-endian base-64 without leading zero digits."""
    if value == 0:
        return ALPHABET[0]

    symbols: list[str] = []
    while value:
        symbols.append(ALPHABET[value & 0x3F])
        value >>= 6
    return "".join(reversed(symbols))


def encode_lstat(file_stat: FileStat) -> str:
    values: list[int] = [getattr(file_stat, field) for field in FIELDS]
    if file_stat.fileindex is not None:
        values.append(file_stat.fileindex)
    return " ".join(encode_token(value) for value in values)


def encode_digest(value: int) -> str:
    """Encode a 128-bit value as 22 symbols, the last 4 bits being padding."""
    return encode_token(value << 4).rjust(22, ALPHABET[0])


def make_stat(**overrides: int) -> FileStat:
    fields: dict[str, int] = {
        "device": 2049,
        "inode": 131073,
        "mode": 0o100644,
        "nlink": 1,
        "uid": 1000,
        "gid": 1000,
        "rdev": 0,
        "size": 0,
        "blksize": 4096,
        "blocks": 0,
        "atime": 1700000000,
        "mtime": 1700000000,
        "ctime": 1700000000,
    }
    fields.update(overrides)
    return FileStat(**fields)
