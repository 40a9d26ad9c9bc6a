"""
Root-restricted file writer with line-level editing.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Union

from winbasic.filesystem.config import FileSystemConfig
from winbasic.filesystem.exceptions import FileOperationError
from winbasic.filesystem.lines import LineMap, parse_line_edits, strip_line_numbers
from winbasic.filesystem.roots import RootRegistry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AppendPosition(str, Enum):
    """Where ``append_text`` puts the new text."""

    BEFORE = "before"
    AFTER = "after"


class RestrictedFileWriter:
    """
    File writer that only touches paths inside the registry's roots.

    Each operation does its reads first and then commits with a single
    write, so a failure never leaves a half-applied edit behind.

    Usage:
        writer = RestrictedFileWriter(FileSystemConfig(), registry)

        writer.write_file("/tmp/project/notes.txt", "hello", create_dirs=True)
        writer.write_lines("/tmp/project/notes.txt", "3:third line")
        writer.append_text("/tmp/project/notes.txt", "# header\\n", "before")
    """

    def __init__(self, config: FileSystemConfig, registry: RootRegistry):
        """
        Initialize the file writer.

        Args:
            config: Filesystem configuration
            registry: Root registry consulted for every path
        """
        self.config = config
        self.registry = registry

    def write_file(
        self,
        path: PathLike,
        content: str,
        create_dirs: bool = False,
        strip_numbers: bool = False,
    ) -> None:
        """
        Write content to a file, replacing what was there.

        Args:
            path: File to write
            content: New content
            create_dirs: Create missing parent directories first
            strip_numbers: Remove ``N:`` prefixes produced by ``read_file``

        Raises:
            FileAccessDeniedError: If the path is outside the roots
            FileOperationError: If a directory or the file cannot be written
        """
        self.registry.require_allowed(path)
        target = Path(path)

        try:
            if create_dirs:
                self._ensure_parent(target)
            if strip_numbers:
                content = strip_line_numbers(content)
            self._write(target, content)
        except OSError as e:
            logger.error(f"Failed to write file {target}: {e}")
            raise FileOperationError("writing file", str(path), e)

        logger.info(f"Wrote file: {target} ({len(content)} chars)")

    def write_lines(
        self, path: PathLike, line_edits: str, create_dirs: bool = False
    ) -> int:
        """
        Replace individual lines of a file.

        ``line_edits`` holds newline-separated ``N:content`` entries. Entries
        that don't match are ignored. A missing file is treated as empty and
        writing past the end pads with empty lines.

        Returns:
            Number of edits applied

        Raises:
            FileAccessDeniedError: If the path is outside the roots
            FileOperationError: If the file cannot be read or written
        """
        self.registry.require_allowed(path)
        target = Path(path)

        try:
            if create_dirs:
                self._ensure_parent(target)
            line_map = LineMap.from_text(self._read_existing(target))
            applied = line_map.apply(parse_line_edits(line_edits))
            self._write(target, line_map.render())
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to update file {target}: {e}")
            raise FileOperationError("updating file", str(path), e)

        logger.info(f"Updated {applied} line(s) in {target}")
        return applied

    def append_text(
        self,
        path: PathLike,
        text: str,
        position: Union[AppendPosition, str] = AppendPosition.AFTER,
        create_dirs: bool = False,
    ) -> None:
        """
        Add text before or after a file's existing content.

        A missing file is treated as empty.

        Raises:
            FileAccessDeniedError: If the path is outside the roots
            FileOperationError: If the file cannot be read or written
            ValueError: If ``position`` is not ``before`` or ``after``
        """
        position = AppendPosition(position)
        self.registry.require_allowed(path)
        target = Path(path)

        try:
            if create_dirs:
                self._ensure_parent(target)
            existing = self._read_existing(target)
            if position is AppendPosition.BEFORE:
                new_content = text + existing
            else:
                new_content = existing + text
            self._write(target, new_content)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to append to file {target}: {e}")
            raise FileOperationError("appending text", str(path), e)

        logger.info(f"Appended {len(text)} chars {position.value} content of {target}")

    def _ensure_parent(self, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)

    def _read_existing(self, target: Path) -> str:
        if not target.exists():
            return ""
        with open(target, "r", encoding=self.config.encoding, newline="") as f:
            return f.read()

    def _write(self, target: Path, content: str) -> None:
        with open(target, "w", encoding=self.config.encoding, newline="") as f:
            f.write(content)
