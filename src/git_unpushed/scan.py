"""Walk a directory tree and classify every repository found in parallel."""

import dataclasses
import logging
import os
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import pathspec

from .status import ClassificationError, ErrorKind, RepoStatus, classify
from .walk import walk

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ScanConfig:
    """Everything a scan needs, built once by the CLI."""

    root: Path = Path()
    threads: int | None = None
    missing_head: bool = False
    ignore: pathspec.PathSpec | None = None

    @property
    def workers(self) -> int:
        return self.threads or os.cpu_count() or 1


@dataclasses.dataclass(frozen=True)
class ScanResult:
    """Outcome of classifying one repository: a status or an error."""

    path: Path
    status: RepoStatus | None = None
    error: ClassificationError | None = None


def classify_one(path: Path, *, missing_head: bool = False) -> ScanResult:
    """Classify one repository, logging the outcome instead of raising."""
    logger.info("Found repository '%s'", path)
    try:
        status = classify(path)
    except ClassificationError as e:
        reason = f"{e}: {e.__cause__}" if e.__cause__ is not None else str(e)
        logger.warning("Failed to check repository '%s': %s", path, reason)
        return ScanResult(path, error=e)
    except Exception as e:  # noqa: BLE001
        error = ClassificationError(path, ErrorKind.UNEXPECTED, "Unexpected error")
        error.__cause__ = e
        logger.warning("Failed to check repository '%s': %s: %r", path, error, e)
        return ScanResult(path, error=error)
    if status is RepoStatus.CLEAN:
        logger.debug("Repository is clean '%s'", path)
    elif status is RepoStatus.MISSING_HEAD and not missing_head:
        logger.warning("Repository has no HEAD '%s'", path)
    return ScanResult(path, status=status)


def is_reported(result: ScanResult, *, missing_head: bool) -> bool:
    """Check if a result should be printed in the active reporting mode."""
    wanted = RepoStatus.MISSING_HEAD if missing_head else RepoStatus.HAS_UNPUSHED
    return result.status is wanted


def scan(
    config: ScanConfig,
    classifier: Callable[..., ScanResult] = classify_one,
) -> Iterator[ScanResult]:
    """Yield the result for every repository below `config.root`.

    Results come in completion order, not discovery order. Repositories that
    fail to classify are yielded too, with `error` set.
    """
    logger.info(
        "Starting repository scan of '%s' (threads=%s)", config.root, config.threads
    )
    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        logger.debug("Configured thread pool with %d workers", config.workers)
        futures = [
            executor.submit(classifier, path, missing_head=config.missing_head)
            for path in walk(config.root, config.ignore)
        ]
        for future in as_completed(futures):
            yield future.result()


def find_reported(config: ScanConfig) -> Iterator[ScanResult]:
    """Yield only the results that match the active reporting mode."""
    for result in scan(config):
        if is_reported(result, missing_head=config.missing_head):
            yield result
