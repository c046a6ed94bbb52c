"""Fixtures that build throwaway git repositories."""

import logging
import shutil
import subprocess
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

GIT_CONFIG = [
    "-c",
    "init.defaultBranch=main",
    "-c",
    "user.name=Test User",
    "-c",
    "user.email=test@example.com",
    "-c",
    "commit.gpgsign=false",
]


def git(cwd: Path, *args: str) -> str:
    """Run git in `cwd` and return its stdout."""
    if shutil.which("git") is None:
        pytest.skip("git binary not available")
    return subprocess.run(
        ["git", *GIT_CONFIG, *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    ).stdout


def init_repo(path: Path, *, bare: bool = False) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", *(["--bare"] if bare else []))
    return path


def commit(path: Path, name: str, content: str = "content\n") -> None:
    (path / name).write_text(content)
    git(path, "add", name)
    git(path, "commit", "-m", f"Add {name}")


def pushed_repo(path: Path, remote: Path) -> Path:
    """Create a repo with one commit pushed to a new bare `remote`."""
    init_repo(remote, bare=True)
    init_repo(path)
    commit(path, "README.md", f"# {path.name}\n")
    git(path, "remote", "add", "origin", str(remote))
    git(path, "push", "-u", "origin", "main")
    return path


@dataclass
class Repos:
    work: Path
    clean: Path
    unpushed: Path
    no_upstream: Path
    behind: Path
    missing_head: Path
    detached: Path


@pytest.fixture
def repos(tmp_path: Path) -> Repos:
    """A work directory with one repository in each state."""
    work = tmp_path / "work"
    remotes = tmp_path / "remotes"

    clean = pushed_repo(work / "clean-repo", remotes / "clean.git")

    unpushed = pushed_repo(work / "unpushed-repo", remotes / "unpushed.git")
    commit(unpushed, "unpushed.txt", "not pushed\n")

    no_upstream = init_repo(work / "no-upstream-repo")
    commit(no_upstream, "README.md")

    behind = pushed_repo(work / "behind-repo", remotes / "behind.git")
    clone = tmp_path / "clone"
    git(tmp_path, "clone", str(remotes / "behind.git"), str(clone))
    commit(clone, "new.txt", "from the clone\n")
    git(clone, "push")
    git(behind, "fetch")

    missing_head = init_repo(work / "missing-head-repo")

    detached = pushed_repo(work / "detached-repo", remotes / "detached.git")
    commit(detached, "local.txt")
    git(detached, "checkout", "--detach")

    return Repos(
        work=work,
        clean=clean,
        unpushed=unpushed,
        no_upstream=no_upstream,
        behind=behind,
        missing_head=missing_head,
        detached=detached,
    )


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop log handlers the CLI installs, they hold captured streams."""
    yield
    logger = logging.getLogger("git_unpushed")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
