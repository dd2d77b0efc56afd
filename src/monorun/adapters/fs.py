"""Filesystem helpers used by the workspace workflows."""

from __future__ import annotations

import shutil
from pathlib import Path


def exists(path: Path | str) -> bool:
    try:
        Path(path).stat()
    except (OSError, ValueError):
        return False
    return True


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def copy_template_if_absent(source: Path, destination: Path) -> bool:
    """Copy ``source`` to ``destination`` unless the destination already exists.

    The destination is opened with exclusive creation, so a file created by a
    concurrent writer is left untouched. Returns ``True`` when a copy was made.
    """

    ensure_directory(destination.parent)
    with source.open("rb") as src:
        try:
            dst = destination.open("xb")
        except FileExistsError:
            return False
        try:
            with dst:
                shutil.copyfileobj(src, dst)
        except BaseException:
            # never leave a partial copy behind
            destination.unlink(missing_ok=True)
            raise
    shutil.copymode(source, destination)
    return True


def remove_if_exists(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        return


def remove_tree(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        remove_if_exists(path)
        return
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
