"""
Root-restricted file reader and directory lister.
"""

import logging
from pathlib import Path
from typing import Union

from winbasic.filesystem.config import FileSystemConfig
from winbasic.filesystem.exceptions import (
    FileOperationError,
    NotDirectoryError,
    PathNotFoundError,
)
from winbasic.filesystem.lines import add_line_numbers
from winbasic.filesystem.roots import RootRegistry
from winbasic.filesystem.walk import iter_entries

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class RestrictedFileReader:
    """
    File reader that only touches paths inside the registry's roots.

    Usage:
        registry = RootRegistry([Root.from_path("/tmp/project")])
        reader = RestrictedFileReader(FileSystemConfig(), registry)

        try:
            text = reader.read_file("/tmp/project/main.py", include_line_numbers=True)
        except FileAccessDeniedError as e:
            print(e)
    """

    def __init__(self, config: FileSystemConfig, registry: RootRegistry):
        """
        Initialize the file reader.

        Args:
            config: Filesystem configuration
            registry: Root registry consulted for every path
        """
        self.config = config
        self.registry = registry

    def read_file(self, path: PathLike, include_line_numbers: bool = False) -> str:
        """
        Read a text file.

        Args:
            path: File to read
            include_line_numbers: Prefix each line with ``N:``

        Returns:
            File contents, optionally line-numbered

        Raises:
            FileAccessDeniedError: If the path is outside the roots
            PathNotFoundError: If the file does not exist
            FileOperationError: If reading or decoding fails
        """
        self.registry.require_allowed(path)

        target = Path(path)
        if not target.exists():
            raise PathNotFoundError(str(path), "File")

        try:
            with open(target, "r", encoding=self.config.encoding, newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read file {target}: {e}")
            raise FileOperationError("reading file", str(path), e)

        logger.debug(f"Read file: {target} ({len(content)} chars)")
        if include_line_numbers:
            return add_line_numbers(content)
        return content

    def list_directory(self, path: PathLike, recursive: bool = False) -> list[str]:
        """
        List a directory's entries.

        Directories carry a trailing ``/``. With ``recursive`` the whole
        subtree is listed depth-first, each entry relative to ``path``.

        Raises:
            FileAccessDeniedError: If the path is outside the roots
            PathNotFoundError: If the directory does not exist
            NotDirectoryError: If the path is not a directory
            FileOperationError: If a directory cannot be read
        """
        self.registry.require_allowed(path)

        target = Path(path)
        if not target.exists():
            raise PathNotFoundError(str(path), "Directory")
        if not target.is_dir():
            raise NotDirectoryError(str(path))

        try:
            entries = list(iter_entries(target, recursive))
        except OSError as e:
            logger.error(f"Failed to list directory {target}: {e}")
            raise FileOperationError("listing directory", str(path), e)

        logger.debug(f"Listed {len(entries)} entries in {target}")
        return entries
