"""Classify a git repository by whether its current branch needs pushing."""

import configparser
import enum
import logging
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.refs.head import Head
from git.refs.remote import RemoteReference
from git.refs.symbolic import SymbolicReference

logger = logging.getLogger(__name__)


class RepoStatus(enum.Enum):
    """Status of the current branch of a repository."""

    CLEAN = "clean"
    HAS_UNPUSHED = "has_unpushed"
    MISSING_HEAD = "missing_head"


class ErrorKind(enum.Enum):
    """Why a repository could not be classified."""

    OPEN_FAILED = "open_failed"
    INCONSISTENT_STATE = "inconsistent_state"
    UNRESOLVED_TARGET = "unresolved_target"
    GRAPH_FAILED = "graph_failed"
    UNEXPECTED = "unexpected"


class ClassificationError(Exception):
    """A repository could not be classified."""

    def __init__(self, path: Path, kind: ErrorKind, message: str) -> None:
        super().__init__(f"{message} at '{path}'")
        self.path = path
        self.kind = kind


def ahead_behind(repo: Repo, local: str, upstream: str) -> tuple[int, int]:
    """Count commits reachable only from `local` and only from `upstream`."""
    counts = repo.git.rev_list("--left-right", "--count", f"{local}...{upstream}")
    ahead, behind = counts.split()
    return int(ahead), int(behind)


def target_of(repo: Repo, ref: SymbolicReference) -> str:
    """Return the commit id a ref points to, without reading the commit."""
    return SymbolicReference.dereference_recursive(repo, ref.path)


def _open_repo(path: Path) -> Repo:
    try:
        repo = Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError, OSError) as e:
        raise ClassificationError(
            path, ErrorKind.OPEN_FAILED, "Failed to open repository"
        ) from e
    try:
        repo.config_reader("repository").read()
    except (configparser.Error, OSError) as e:
        repo.close()
        raise ClassificationError(
            path, ErrorKind.OPEN_FAILED, "Failed to read repository config"
        ) from e
    return repo


def _upstream_of(repo: Repo, branch: Head) -> RemoteReference | None:
    tracking_branch = branch.tracking_branch()
    if tracking_branch is None:
        return None
    if tracking_branch.remote_name == ".":
        # tracking a local branch
        return None
    if tracking_branch.name not in repo.refs:
        # configured, but never fetched or deleted on the remote
        return None
    return tracking_branch


def _classify_repo(repo: Repo, path: Path) -> RepoStatus:
    head = repo.head
    if head.is_detached:
        return RepoStatus.CLEAN
    # unborn: HEAD names a branch that has no ref yet
    if head.ref.path not in {ref.path for ref in repo.refs}:
        return RepoStatus.MISSING_HEAD

    try:
        branch_name = head.ref.name
        branch = repo.heads[branch_name]
    except (TypeError, ValueError, IndexError) as e:
        raise ClassificationError(
            path, ErrorKind.INCONSISTENT_STATE, "Failed to find local branch"
        ) from e

    upstream = _upstream_of(repo, branch)
    if upstream is None:
        logger.debug("No upstream for branch %s in %s", branch_name, path)
        return RepoStatus.HAS_UNPUSHED

    try:
        local_sha = target_of(repo, branch)
    except ValueError as e:
        raise ClassificationError(
            path, ErrorKind.UNRESOLVED_TARGET, "Failed to get local branch target"
        ) from e
    try:
        remote_sha = target_of(repo, upstream)
    except ValueError as e:
        raise ClassificationError(
            path, ErrorKind.UNRESOLVED_TARGET, "Failed to get remote branch target"
        ) from e
    if local_sha == remote_sha:
        return RepoStatus.CLEAN

    try:
        ahead, behind = ahead_behind(repo, local_sha, remote_sha)
    except (GitCommandError, ValueError) as e:
        raise ClassificationError(
            path, ErrorKind.GRAPH_FAILED, "Failed to calculate ahead/behind"
        ) from e
    logger.debug(
        "Branch %s in %s is %d ahead, %d behind %s",
        branch_name,
        path,
        ahead,
        behind,
        upstream.name,
    )
    return RepoStatus.HAS_UNPUSHED if ahead > 0 else RepoStatus.CLEAN


def classify(path: Path) -> RepoStatus:
    """Return the status of the repository at `path`.

    Raises `ClassificationError` when the repository can't be opened or its
    refs are inconsistent. An unborn HEAD and a missing upstream are
    statuses, not errors.
    """
    path = Path(path)
    repo = _open_repo(path)
    try:
        # closing can fail too, when a git helper process already died
        with repo:
            return _classify_repo(repo, path)
    except (GitCommandError, ValueError, OSError, configparser.Error) as e:
        raise ClassificationError(
            path, ErrorKind.INCONSISTENT_STATE, "Failed to read refs"
        ) from e
