import logging
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
import yaml

from .catalog_db import CatalogDB
from .CatalogStore import CatalogStore
from .config import CONFIG_FILENAME, AppConfig
from .du import digest_lines, du_report
from .errors import CatalogError, CatduError, ConfigError, UnitParseError
from .models import DuOptions, Job
from .units import parse_size

catdu_version: str = version(distribution_name="catdu")
app: typer.Typer = typer.Typer(
    help=f"catdu: disk usage of backed up files, read from the catalog\n\nVersion: {catdu_version}",
)

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def print_version(is_version: bool) -> None:
    """
    Callback for the global --version / -V option.

    Prints the installed version of the 'catdu' package and terminates the
    program early by raising `typer.Exit()` when the flag is given.
    """
    if not is_version:
        return

    try:
        ver: str = version(distribution_name="catdu")
    except PackageNotFoundError:
        ver = "unknown (package not installed)"

    typer.echo(ver)
    raise typer.Exit()


def parse_size_option(value: str, option: str) -> int:
    try:
        return parse_size(value)
    except UnitParseError as e:
        raise typer.BadParameter(str(e), param_hint=option)


def resolve_config(catalog: Path | None) -> AppConfig:
    """
    Settings from config.yaml, with --catalog taking precedence.

    Without --catalog the config file has to exist.
    """
    if CONFIG_FILENAME.exists():
        try:
            cfg: AppConfig = AppConfig.load()
        except (ValueError, TypeError, KeyError, yaml.YAMLError) as e:
            raise ConfigError(f"Invalid {CONFIG_FILENAME}: {e}") from e
        if catalog is not None:
            cfg.catalog_path = catalog
    elif catalog is not None:
        cfg = AppConfig(catalog_path=catalog)
    else:
        typer.echo("Missing config file. Run catdu init first or pass --catalog.", err=True)
        raise typer.Exit(code=1)

    if not cfg.catalog_path.exists():
        raise CatalogError(f"Catalog {cfg.catalog_path} does not exist")

    return cfg


def fail(error: CatduError) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


@app.command()
def init(
    catalog: Path,
    block_size: Annotated[str, typer.Option(help="Output unit, e.g. 1K, 1Ki, 512")] = "1Ki",
    threshold: Annotated[str, typer.Option(help="Hide entries smaller than this")] = "1",
    force: Annotated[bool, typer.Option()] = False,
) -> None:
    """
    Write a config file pointing at a catalog.

    Stores the catalog location together with the default block size and
    threshold used by the du command.
    """
    if CONFIG_FILENAME.exists() and not force:
        typer.echo("Config file already exists. Use --force to overwrite.")
        raise typer.Exit(code=1)

    cfg: AppConfig = AppConfig(
        catalog_path=catalog.resolve(),
        block_size=parse_size_option(block_size, "--block-size"),
        threshold=parse_size_option(threshold, "--threshold"),
    )

    cfg.save(CONFIG_FILENAME)
    typer.echo(f"Config written to {CONFIG_FILENAME}")


@app.command()
def du(
    job_id: int,
    path: Annotated[str | None, typer.Argument(help="Only report below this path")] = None,
    catalog: Annotated[Path | None, typer.Option(help="Catalog database, overrides config.yaml")] = None,
    all_files: Annotated[bool, typer.Option("--all", "-a", help="Write counts for all files, not just directories")] = False,
    separate_dirs: Annotated[
        bool, typer.Option("--separate-dirs", "-S", help="Do not include size of subdirectories")
    ] = False,
    apparent_size: Annotated[bool, typer.Option("--apparent-size", help="Use file sizes, not block usage")] = False,
    count: Annotated[bool, typer.Option("--count", "--inodes", help="Count files instead of bytes")] = False,
    top: Annotated[int | None, typer.Option("--top", "-n", min=1, help="Only show the N largest entries")] = None,
    threshold: Annotated[
        str | None, typer.Option("--threshold", "-t", help="Hide entries smaller than this, e.g. 10M")
    ] = None,
    block_size: Annotated[
        str | None, typer.Option("--block-size", "-B", help="Output unit, e.g. 1K, 1Mi, 512")
    ] = None,
    format_template: Annotated[
        str | None, typer.Option("--format", help="stat(1) style template, e.g. '%9s %n'")
    ] = None,
) -> None:
    """Summarize disk usage of the files backed up by a job."""
    try:
        cfg: AppConfig = resolve_config(catalog)

        options: DuOptions = DuOptions(
            threshold=cfg.threshold if threshold is None else parse_size_option(threshold, "--threshold"),
            block_size=cfg.block_size if block_size is None else parse_size_option(block_size, "--block-size"),
            apparent_size=apparent_size,
            count=count,
            separate_dirs=separate_dirs,
            all_files=all_files,
            top_n=top,
            format_template=format_template,
            root=path,
        )
        if options.block_size <= 0:
            raise typer.BadParameter("Block size must be positive", param_hint="--block-size")

        with CatalogDB(cfg.catalog_path) as db:
            lines: list[str] = du_report(CatalogStore(db), job_id, options)
    except CatduError as e:
        raise fail(e)

    for line in lines:
        typer.echo(line)


@app.command()
def digests(
    job_id: int,
    path: Annotated[str | None, typer.Argument(help="Only list files below this path")] = None,
    catalog: Annotated[Path | None, typer.Option(help="Catalog database, overrides config.yaml")] = None,
) -> None:
    """List recorded digests in a format md5sum -c accepts."""
    try:
        cfg: AppConfig = resolve_config(catalog)

        with CatalogDB(cfg.catalog_path) as db:
            lines: list[str] = list(digest_lines(CatalogStore(db), job_id, root=path))
    except CatduError as e:
        raise fail(e)

    for line in lines:
        typer.echo(line)


def _format_time(ts: int | None) -> str:
    if ts is None:
        return "never"
    return datetime.fromtimestamp(ts).isoformat(timespec="seconds")


@app.command()
def jobs(
    catalog: Annotated[Path | None, typer.Option(help="Catalog database, overrides config.yaml")] = None,
) -> None:
    """Show the jobs recorded in the catalog."""
    try:
        cfg: AppConfig = resolve_config(catalog)

        with CatalogDB(cfg.catalog_path) as db:
            found: list[Job] = CatalogStore(db).list_jobs()
    except CatduError as e:
        raise fail(e)

    for job in found:
        typer.echo(f"{job.id:>6}  {_format_time(job.started_at)}  {job.file_count:>9}  {job.name}")


@app.command(name="version")
def version_cmd() -> None:
    """Print the installed version of catdu."""
    print_version(True)


@app.callback()
def main(
    _version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=print_version,
            is_eager=True,
        ),
    ] = False,
    log_level: Annotated[
        str, typer.Option("--log-level", help=f"One of {', '.join(LOG_LEVELS)}")
    ] = "WARNING",
) -> None:
    """
    Global options for catdu. All subcommands run after this callback unless
    --version is used.
    """
    level: str = log_level.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level {log_level!r}", param_hint="--log-level")

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, level),
    )


if __name__ == "__main__":
    app()
