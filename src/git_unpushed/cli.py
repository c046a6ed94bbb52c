"""CLI for git_unpushed."""

from pathlib import Path
from typing import Annotated

import typer
from click.exceptions import UsageError

from . import __version__
from .format import (
    REPORT_FORMATS,
    REPORT_FORMATS_TYPE,
    STREAMED_FORMATS,
    format_line,
    format_report,
)
from .log import LOG_LEVELS, parse_log_level, resolve_log_level, setup_logging
from .scan import ScanConfig, find_reported
from .walk import load_ignore_file

app = typer.Typer()


def _version_callback(value: bool) -> None:  # noqa: FBT001
    if value:
        print(f"git-unpushed {__version__}")
        raise typer.Exit(0)


def _log_level_callback(value: str | None) -> str | None:
    if value is not None:
        try:
            parse_log_level(value)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
    return value


@app.command()
def git_unpushed(  # noqa: PLR0913
    path: Annotated[Path, typer.Argument(help="directory to search")] = Path(),
    *,
    threads: Annotated[
        int | None,
        typer.Option(
            "-t", "--threads", min=1, help="number of threads [default: CPU count]"
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "-l",
            "--log-level",
            envvar="GIT_UNPUSHED_LOG",
            callback=_log_level_callback,
            help=f"log level ({', '.join(LOG_LEVELS)}) [default: warn]",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="same as --log-level info")
    ] = False,
    missing_head: Annotated[
        bool,
        typer.Option(
            "--missing-head",
            help=(
                "list repos with missing HEAD instead (default log level becomes"
                " error; an explicit --log-level still applies)"
            ),
        ),
    ] = False,
    exclude_from: Annotated[
        Path | None,
        typer.Option(
            "-x",
            "--exclude-from",
            help="read gitignore-style exclude patterns from this file",
        ),
    ] = None,
    fmt: Annotated[
        str, typer.Option("-f", "--format", help="output format")
    ] = "paths",
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Print version",
        ),
    ] = None,
) -> int:
    """Find git repos that have commits that are not yet pushed."""
    if fmt not in REPORT_FORMATS:
        raise UsageError(f"format must be one of {REPORT_FORMATS}")
    fmt_report: REPORT_FORMATS_TYPE = fmt  # type: ignore[assignment]
    ignore = None
    if exclude_from is not None:
        try:
            ignore = load_ignore_file(exclude_from)
        except OSError as e:
            raise typer.BadParameter(
                f"can't read exclude file: {e}", param_hint="'--exclude-from'"
            ) from e
    setup_logging(
        resolve_log_level(log_level, verbose=verbose, missing_head=missing_head)
    )

    config = ScanConfig(
        root=path, threads=threads, missing_head=missing_head, ignore=ignore
    )
    if fmt_report in STREAMED_FORMATS:
        for result in find_reported(config):
            print(format_line(result, fmt=fmt_report), flush=True)
    else:
        report = format_report(list(find_reported(config)), fmt=fmt_report)
        if report:
            print(report)
    return 0
