"""Console output helpers shared by the workflow services."""

from __future__ import annotations

import os
import sys
from pathlib import Path

CHECK_PASSED = "✔"
CHECK_FAILED = "✖"


def print_header(message: str) -> None:
    print(f"\n{message}\n{'-' * len(message)}", flush=True)


def rel_path(path: Path, root: Path) -> str:
    try:
        return os.path.relpath(path, root)
    except ValueError:  # different drives on Windows
        return str(path)


def log_check_result(name: str, passed: bool, detail: str | None = None) -> None:
    symbol = CHECK_PASSED if passed else CHECK_FAILED
    print(f"{symbol} {name}")
    if not passed and detail:
        print(f"    {detail}")


def warn(message: str) -> None:
    print(message, file=sys.stderr, flush=True)
