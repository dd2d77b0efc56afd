"""PATH lookups that never execute the located binary."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Sequence

WINDOWS_EXTENSIONS = (".cmd", ".exe", ".bat")


def _extensions(platform: str) -> Sequence[str]:
    return WINDOWS_EXTENSIONS if platform == "nt" else ("",)


def locate(
    binary: str,
    *,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> str | None:
    """Return the first ``PATH`` entry holding ``binary``, or ``None``."""

    environ = os.environ if env is None else env
    platform = os.name if platform is None else platform
    delimiter = ";" if platform == "nt" else ":"
    search_path = environ.get("PATH", "")
    for base in search_path.split(delimiter):
        if not base:
            continue
        for extension in _extensions(platform):
            candidate = Path(base) / f"{binary}{extension}"
            if candidate.is_file():
                return str(candidate)
    return None
