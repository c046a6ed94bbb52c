"""Format the repositories found by a scan."""

import json
from typing import Literal

import yaml
from colorama import Fore

from .scan import ScanResult

REPORT_FORMATS_TYPE = Literal["paths", "report", "yaml", "json"]
REPORT_FORMATS = ["paths", "report", "yaml", "json"]
# formats printed line by line while the scan runs
STREAMED_FORMATS = {"paths", "report"}

_STATUS_COLORS = {
    "has_unpushed": Fore.LIGHTRED_EX,
    "missing_head": Fore.YELLOW,
    "clean": Fore.GREEN,
}


def format_line(result: ScanResult, *, fmt: REPORT_FORMATS_TYPE) -> str:
    """Format a single result as one output line."""
    if fmt == "paths":
        return str(result.path)
    if fmt == "report":
        status = result.status.value if result.status else "error"
        color = _STATUS_COLORS.get(status, Fore.LIGHTRED_EX)
        return f"{result.path}: {color}{status}{Fore.RESET}"
    raise ValueError(f"format_line got an unsupported {fmt=}")


def _as_mapping(results: list[ScanResult]) -> dict[str, str]:
    return {
        str(r.path): r.status.value if r.status else "error"
        for r in sorted(results, key=lambda r: str(r.path))
    }


def format_report(results: list[ScanResult], *, fmt: REPORT_FORMATS_TYPE) -> str:
    """Format all results at once, for formats that aren't streamed."""
    try:
        return {
            "yaml": _format_yaml,
            "json": _format_json,
        }[fmt](results)
    except KeyError as e:
        raise ValueError(f"format_report got an unsupported {fmt=}") from e


def _format_yaml(results: list[ScanResult]) -> str:
    if not results:
        return ""
    return yaml.dump(
        _as_mapping(results),
        allow_unicode=True,
        default_flow_style=False,
        indent=2,
        sort_keys=False,
    ).rstrip("\n")


def _format_json(results: list[ScanResult]) -> str:
    return json.dumps(_as_mapping(results), indent=2)
