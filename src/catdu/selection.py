from collections.abc import Iterable, Mapping

DEFAULT_THRESHOLD: int = 1

# Sorts after every character a path can hold, "/" in particular, so
# "parent/child" + SENTINEL < "parent" + SENTINEL.
SENTINEL: str = "\U0010ffff"


def effective_threshold(values: Iterable[int], top_n: int | None = None, threshold: int = DEFAULT_THRESHOLD) -> int:
    """
    Combine an explicit threshold with a top-N request.

    The N-th largest value becomes a cutoff; it can only raise the explicit
    threshold, never lower it. Requires the complete set of values.
    """
    if top_n is None:
        return threshold

    ordered: list[int] = sorted(values)
    cutoff: int = ordered[len(ordered) - top_n] if top_n < len(ordered) else 0

    return max(threshold, cutoff)


def sort_key(path: str) -> str:
    return path + SENTINEL


def ordered_keys(usage: Mapping[str, int], threshold: int = DEFAULT_THRESHOLD) -> list[str]:
    """Return the paths at or above threshold, every directory after its contents."""
    return sorted((path for path, value in usage.items() if value >= threshold), key=sort_key)
