import re

from .errors import UnitParseError

DEFAULT_BLOCK_SIZE: int = 1024

_SIZE_PATTERN: re.Pattern[str] = re.compile(r"^(?P<count>[0-9]*)(?P<unit>k|Ki|ki|[MGTP]i?)?B?$")

_EXPONENTS: dict[str, int] = {"k": 1, "m": 2, "g": 3, "t": 4, "p": 5}


def parse_size(value: str) -> int:
    """
    Parse a human readable byte count such as ``100``, ``5M`` or ``2GiB``.

    The count defaults to 1 when only a unit is given. Plain suffixes are
    powers of 1000, ``i`` suffixes (and lowercase ``ki``) powers of 1024. A
    trailing ``B`` is accepted and ignored.
    """
    text: str = value.strip()
    match: re.Match[str] | None = _SIZE_PATTERN.match(text)

    if match is None or not (match["count"] or match["unit"]):
        raise UnitParseError(f"Invalid size {value!r}. Use e.g. 100, 32k, 4Mi or 1GiB.")

    count: int = int(match["count"]) if match["count"] else 1
    unit: str | None = match["unit"]

    if unit is None:
        return count

    base: int = 1024 if unit.endswith("i") else 1000
    return count * base ** _EXPONENTS[unit[0].lower()]


def user_blocks(n: int, block_size: int = DEFAULT_BLOCK_SIZE) -> int:
    return -(-n // block_size)
