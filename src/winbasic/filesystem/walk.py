"""
Iterative directory walkers.

Both walkers keep an explicit stack of pending directories, visit entries in
name order and never follow symbolic links.
"""

import os
from pathlib import Path
from typing import Iterator, Union

PathLike = Union[str, Path]


def scan_sorted(directory: PathLike) -> list[os.DirEntry]:
    """Read a directory's entries, sorted by name."""
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def iter_files(base: PathLike, recursive: bool = True) -> Iterator[str]:
    """Yield the full path of every regular file under ``base``, depth-first."""
    stack: list[Iterator[os.DirEntry]] = [iter(scan_sorted(base))]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        if entry.is_dir(follow_symlinks=False):
            if recursive:
                stack.append(iter(scan_sorted(entry.path)))
        elif entry.is_file(follow_symlinks=False):
            yield entry.path


def iter_entries(base: PathLike, recursive: bool = False) -> Iterator[str]:
    """
    Yield entries relative to ``base``, directories with a trailing ``/``.

    With ``recursive`` a directory is followed immediately by its contents.
    """
    stack: list[tuple[str, Iterator[os.DirEntry]]] = [("", iter(scan_sorted(base)))]
    while stack:
        prefix, pending = stack[-1]
        entry = next(pending, None)
        if entry is None:
            stack.pop()
            continue
        relative = os.path.join(prefix, entry.name) if prefix else entry.name
        if entry.is_dir(follow_symlinks=False):
            yield f"{relative}/"
            if recursive:
                stack.append((relative, iter(scan_sorted(entry.path))))
        else:
            yield relative
