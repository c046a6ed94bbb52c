"""Find git repositories below a directory."""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pathspec

from .log import TRACE

logger = logging.getLogger(__name__)

GIT_DIR = ".git"


def load_ignore_file(path: Path) -> pathspec.GitIgnoreSpec:
    """Load a newline-delimited file of gitignore-style patterns."""
    with Path(path).open(encoding="utf-8") as f:
        return pathspec.GitIgnoreSpec.from_lines(f)


def is_excluded(rel_path: str, name: str, ignore: pathspec.PathSpec | None) -> bool:
    """Check if a directory entry should be pruned from the walk.

    `rel_path` is the entry's path relative to the walk root, using `/` as a
    separator. The root itself is never passed here.
    """
    if ignore is not None and ignore.match_file(rel_path + "/"):
        return True
    return name.startswith(".") and name != GIT_DIR


def _log_walk_error(error: OSError) -> None:
    logger.warning("Skipping unreadable directory '%s': %s", error.filename, error)


def walk(root: Path, ignore: pathspec.PathSpec | None = None) -> Iterator[Path]:
    """Yield the working directory of every repository below `root`.

    A repository is a directory holding a `.git` directory. Symlinks are
    never followed, and `.git` directories are never entered.
    """
    root = Path(root)
    for dirpath, dirnames, _filenames in os.walk(
        root, onerror=_log_walk_error, followlinks=False
    ):
        current = Path(dirpath)
        logger.log(TRACE, "Visiting '%s'", current)
        rel_dir = current.relative_to(root).as_posix()
        kept = []
        for name in dirnames:
            rel_path = name if rel_dir == "." else f"{rel_dir}/{name}"
            if is_excluded(rel_path, name, ignore):
                continue
            if name == GIT_DIR:
                if not (current / name).is_symlink():
                    yield current
                continue
            kept.append(name)
        # os.walk only descends into what is left in dirnames
        dirnames[:] = kept
