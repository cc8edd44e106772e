import logging

from .errors import DecodeError
from .lstat import ALPHABET, decode_token

logger: logging.Logger = logging.getLogger(__name__)

NO_DIGEST: str = "0"
DIGEST_SYMBOLS: int = 22

# (symbols, hex digits) per group. 24 bits fit a small int on any platform,
# the last group carries 8 digest bits plus 4 padding bits.
DIGEST_GROUPS: tuple[tuple[int, int], ...] = ((4, 6), (4, 6), (4, 6), (4, 6), (4, 6), (2, 3))


def has_digest(value: str | None) -> bool:
    """Symlinks and deleted entries are stored with "0" instead of a digest."""
    return bool(value) and value != NO_DIGEST


def decode_digest(encoded: str, *, strict: bool = True) -> str:
    """
    Turn an encoded 128-bit digest into 32 lowercase hex digits.

    Short values are left padded with the zero symbol. The 4 padding bits in
    the last symbol must be zero; corruption is always logged and, in strict
    mode, raised as a DecodeError.
    """
    text: str = encoded.strip()

    if len(text) > DIGEST_SYMBOLS:
        raise DecodeError(f"Digest longer than {DIGEST_SYMBOLS} symbols: {encoded!r}")

    text = text.rjust(DIGEST_SYMBOLS, ALPHABET[0])

    parts: list[str] = []
    start: int = 0
    for symbols, hex_digits in DIGEST_GROUPS:
        try:
            value: int = decode_token(text[start : start + symbols])
        except DecodeError as e:
            raise DecodeError(f"Corrupt digest {encoded!r}: {e}") from e
        parts.append(f"{value:0{hex_digits}x}")
        start += symbols

    hex_text: str = "".join(parts)

    if hex_text[-1] != "0":
        logger.warning("Digest %r has non-zero padding bits", encoded)
        if strict:
            raise DecodeError(f"Corrupt digest {encoded!r}: non-zero padding bits")

    return hex_text[:-1]
