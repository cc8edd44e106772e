import logging
from collections.abc import Iterable, Iterator

from .aggregate import PathAggregator, join_path, normalize_path
from .CatalogStore import CatalogStore
from .digest import decode_digest, has_digest
from .errors import DecodeError
from .lstat import FileStat, decode_lstat
from .models import DuOptions, Payload, Record
from .selection import effective_threshold, ordered_keys
from .statformat import FormatSpec, compile_format
from .units import user_blocks

logger: logging.Logger = logging.getLogger(__name__)


def build_aggregator(options: DuOptions) -> PathAggregator:
    return PathAggregator(
        options.metric,
        root=normalize_path(options.root) if options.root else "/",
        separate_dirs=options.separate_dirs,
        # Formatted output is per file, so files always get their own entry
        include_files=options.all_files or options.format_template is not None,
        keep_stats=options.format_template is not None,
    )


def aggregate_records(records: Iterable[Record], aggregator: PathAggregator) -> PathAggregator:
    """
    Feed every record into the aggregator.

    Records outside the aggregator's root are skipped before decoding. A
    corrupt stat value raises DecodeError and aborts the whole pass.
    """
    consumed: int = 0
    skipped: int = 0

    for record in records:
        if not aggregator.accepts(record.directory):
            skipped += 1
            continue

        file_stat: FileStat | None = None
        if record.payload is not None and (aggregator.metric.needs_stat or aggregator.keep_stats):
            file_stat = decode_lstat(record.payload)
        elif aggregator.metric.needs_stat:
            raise DecodeError(f"No stat value recorded for {record.directory}{record.filename}")

        aggregator.add(record.directory, record.filename, file_stat)
        consumed += 1

    logger.debug("Aggregated %d records, skipped %d outside %s", consumed, skipped, aggregator.root)

    return aggregator


def summary_lines(aggregator: PathAggregator, options: DuOptions) -> list[str]:
    threshold: int = effective_threshold(aggregator.usage.values(), options.top_n, options.threshold)
    keys: list[str] = ordered_keys(aggregator.usage, threshold)

    if options.count:
        amounts: list[int] = [aggregator.usage[key] for key in keys]
    else:
        amounts = [user_blocks(aggregator.usage[key], options.block_size) for key in keys]

    width: int = max((len(str(amount)) for amount in amounts), default=0)

    return [f"{amount:>{width}} {key}" for amount, key in zip(amounts, keys)]


def formatted_lines(aggregator: PathAggregator, options: DuOptions, spec: FormatSpec) -> list[str]:
    # Directories without a catalog entry of their own have nothing to show
    usage: dict[str, int] = {key: value for key, value in aggregator.usage.items() if key in aggregator.stats}
    threshold: int = effective_threshold(usage.values(), options.top_n, options.threshold)

    return [spec.render(aggregator.stats[key], key) for key in ordered_keys(usage, threshold)]


def du_report(store: CatalogStore, job_id: int, options: DuOptions) -> list[str]:
    """
    Build the usage report for one job.

    The format template is compiled before the catalog is read so a bad
    template fails without doing any work. All output is produced only
    after the full pass, since top-N needs every value.
    """
    spec: FormatSpec | None = None
    if options.format_template is not None:
        spec = compile_format(options.format_template, block_size=options.block_size)

    _ = store.get_job(job_id)

    aggregator: PathAggregator = build_aggregator(options)
    records: Iterator[Record] = store.iter_records(job_id, root=options.root, payload=options.payload)
    aggregate_records(records, aggregator)

    if spec is not None:
        return formatted_lines(aggregator, options, spec)
    return summary_lines(aggregator, options)


def digest_lines(store: CatalogStore, job_id: int, root: str | None = None) -> Iterator[str]:
    """
    Yield "<hex>  <path>" lines, the layout md5sum -c expects.

    Entries without a digest (symlinks, deleted files) are skipped.
    """
    _ = store.get_job(job_id)

    skipped: int = 0
    for record in store.iter_records(job_id, root=root, payload=Payload.DIGEST):
        if not has_digest(record.payload):
            skipped += 1
            continue

        assert record.payload is not None

        path: str = join_path(normalize_path(record.directory), record.filename)
        yield f"{decode_digest(record.payload)}  {path}"

    logger.debug("Skipped %d records without a digest", skipped)
