"""
Root registry: the live set of directories a client permits access to.

The registry starts empty, which means *unrestricted*: every path is
authorized until the client announces its roots. Once roots are known,
a path is authorized only if it lies inside one of them.

Updates replace the whole snapshot. Readers always evaluate against a
single consistent snapshot, so a concurrent update is never observed
half-applied.
"""

import logging
import os
import posixpath
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Union
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from winbasic.filesystem.exceptions import FileAccessDeniedError

logger = logging.getLogger(__name__)

_DRIVE_PATH = re.compile(r"^[A-Za-z]:([\\/]|$)")


class Root(BaseModel):
    """A client-authorized directory, identified by a ``file:`` URI."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="file: URI of the permitted directory")
    name: Optional[str] = Field(default=None, description="Display name")

    @classmethod
    def from_path(cls, path: Union[str, Path], name: Optional[str] = None) -> "Root":
        """Build a root from a local directory path."""
        resolved = Path(path).expanduser().resolve()
        return cls(uri=resolved.as_uri(), name=name or resolved.name or str(resolved))

    @classmethod
    def from_value(cls, value: str) -> "Root":
        """Accept either a URI (anything with a scheme) or a plain path."""
        if "://" in value or value.startswith("file:"):
            return cls(uri=value)
        return cls.from_path(value)


@dataclass(frozen=True)
class RootSnapshot:
    """Immutable view of the root set at one point in time."""

    version: int
    roots: tuple[Root, ...] = field(default_factory=tuple)


def normalize_path(path: str) -> str:
    """
    Normalize a path for prefix comparison.

    Resolves ``.`` and ``..`` lexically, unifies separators to ``/`` and
    applies the platform's case folding. Relative paths are anchored at the
    current working directory, except for Windows drive paths, which are
    already absolute regardless of the host platform. A leading ``~`` is
    an ordinary path component, as it is for ``open``.
    """
    unified = path.replace("\\", "/")
    if _DRIVE_PATH.match(unified):
        normalized = posixpath.normpath(unified)
    else:
        normalized = os.path.normpath(os.path.abspath(path)).replace("\\", "/")
    return os.path.normcase(normalized).replace("\\", "/")


def root_to_path(root: Root) -> Optional[str]:
    """
    Decode a root's URI into a normalized filesystem path.

    Returns None for non-``file:`` schemes and malformed URIs; such a root
    can never match anything.
    """
    try:
        parts = urlsplit(root.uri)
    except ValueError as e:
        logger.warning(f"Ignoring malformed root URI {root.uri!r}: {e}")
        return None

    if parts.scheme.lower() != "file":
        return None

    if re.match(r"^[A-Za-z]:$", parts.netloc):
        # file://C:/dir
        raw = parts.netloc + unquote(parts.path)
    elif parts.netloc and parts.netloc.lower() != "localhost":
        # UNC share: file://server/share -> //server/share
        raw = f"//{parts.netloc}{unquote(parts.path)}"
    else:
        raw = unquote(parts.path)
        # file:///C:/dir -> C:/dir
        if re.match(r"^/[A-Za-z]:", raw):
            raw = raw[1:]

    if not raw:
        logger.warning(f"Ignoring root URI without a path: {root.uri!r}")
        return None

    return normalize_path(raw)


def is_within(path: str, root_path: str) -> bool:
    """Component-wise prefix test on two normalized paths."""
    if path == root_path:
        return True
    prefix = root_path if root_path.endswith("/") else root_path + "/"
    return path.startswith(prefix)


class RootRegistry:
    """
    Holds the current root set and answers authorization queries.

    Usage:
        registry = RootRegistry()
        registry.is_allowed("/anything")          # True: no roots yet

        registry.update([Root(uri="file:///srv/project")])
        registry.is_allowed("/srv/project/a.txt") # True
        registry.is_allowed("/etc/passwd")        # False
    """

    def __init__(self, roots: Optional[Iterable[Root]] = None):
        self._lock = threading.Lock()
        self._snapshot = RootSnapshot(version=0)
        if roots:
            self.update(roots)

    def reset(self) -> None:
        """Drop every root, returning to the unrestricted state."""
        with self._lock:
            self._snapshot = RootSnapshot(version=self._snapshot.version + 1)
        logger.debug("Roots reset")

    def update(self, roots: Iterable[Root]) -> None:
        """Replace the root set wholesale. URIs are not validated here."""
        new_roots = tuple(roots)
        with self._lock:
            self._snapshot = RootSnapshot(
                version=self._snapshot.version + 1, roots=new_roots
            )
            version = self._snapshot.version
        logger.info(
            f"Roots updated (v{version}): "
            f"{[root.model_dump(exclude_none=True) for root in new_roots]}"
        )

    def snapshot(self) -> RootSnapshot:
        """Return the current snapshot."""
        with self._lock:
            return self._snapshot

    def current(self) -> list[Root]:
        """Return the live roots for listing."""
        return list(self.snapshot().roots)

    def is_allowed(self, path: Union[str, Path]) -> bool:
        """Check whether a path lies inside one of the current roots."""
        snapshot = self.snapshot()
        if not snapshot.roots:
            return True

        normalized = normalize_path(str(path))
        for root in snapshot.roots:
            root_path = root_to_path(root)
            if root_path is not None and is_within(normalized, root_path):
                return True

        logger.debug(f"Path {normalized} is outside {len(snapshot.roots)} root(s)")
        return False

    def require_allowed(self, path: Union[str, Path], subject: str = "path") -> None:
        """
        Raise unless the path is authorized.

        Args:
            path: Candidate path
            subject: How the path is named in the error message

        Raises:
            FileAccessDeniedError: If the path is outside every root
        """
        if not self.is_allowed(path):
            logger.warning(f"Access denied to {subject} {path}: outside allowed roots")
            raise FileAccessDeniedError(str(path), subject)

    def __repr__(self) -> str:
        snapshot = self.snapshot()
        return f"RootRegistry(version={snapshot.version}, roots={len(snapshot.roots)})"
