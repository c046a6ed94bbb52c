"""git-unpushed: Find git repositories with commits that are not yet pushed."""

from ._version import version as _version
from .scan import (
    ScanConfig,
    ScanResult,
    scan,
)
from .status import (
    ClassificationError,
    ErrorKind,
    RepoStatus,
    classify,
)
from .walk import walk

__version__ = _version
__all__: list[str] = [
    "ClassificationError",
    "ErrorKind",
    "RepoStatus",
    "ScanConfig",
    "ScanResult",
    "classify",
    "scan",
    "walk",
]
