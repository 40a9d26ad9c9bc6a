"""
Bounded regex search over file names and file contents.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from winbasic.filesystem.config import FileSystemConfig
from winbasic.filesystem.exceptions import (
    FileOperationError,
    InvalidPatternError,
    NotDirectoryError,
    PathNotFoundError,
)
from winbasic.filesystem.roots import RootRegistry
from winbasic.filesystem.walk import iter_files

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SearchType(str, Enum):
    """What a search pattern is tested against."""

    NAME = "name"
    CONTENT = "content"
    BOTH = "both"

    @property
    def checks_name(self) -> bool:
        return self in (SearchType.NAME, SearchType.BOTH)

    @property
    def checks_content(self) -> bool:
        return self in (SearchType.CONTENT, SearchType.BOTH)


@dataclass
class SearchResult:
    """One matching file and what matched in it."""

    relative_path: str
    matches: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"SearchResult({self.relative_path!r}, matches={len(self.matches)})"


class RestrictedSearchEngine:
    """
    Regex search confined to the registry's roots.

    Patterns are case-insensitive. Name searches test the path relative to
    the base directory; content searches test each line and keep at most
    ``max_matches_per_file`` hits per file. The walk stops once
    ``max_results`` files have matched.

    Usage:
        engine = RestrictedSearchEngine(FileSystemConfig(), registry)
        results = engine.search("/tmp/project", r"def \\w+", SearchType.CONTENT)
        for result in results:
            print(result.relative_path, result.matches)
    """

    def __init__(self, config: FileSystemConfig, registry: RootRegistry):
        self.config = config
        self.registry = registry

    def search(
        self,
        base_path: PathLike,
        pattern: str,
        search_type: Union[SearchType, str] = SearchType.BOTH,
        recursive: bool = True,
        max_results: Optional[int] = None,
    ) -> list[SearchResult]:
        """
        Search files under ``base_path``.

        Args:
            base_path: Directory to search
            pattern: Regular expression (case-insensitive)
            search_type: ``name``, ``content`` or ``both``
            recursive: Descend into subdirectories
            max_results: Maximum number of matching files

        Returns:
            Matching files in traversal order

        Raises:
            FileAccessDeniedError: If the base path is outside the roots
            PathNotFoundError: If the base path does not exist
            NotDirectoryError: If the base path is not a directory
            InvalidPatternError: If the pattern does not compile
            FileOperationError: If a directory cannot be read
        """
        search_type = SearchType(search_type)
        if max_results is None:
            max_results = self.config.max_search_results

        self.registry.require_allowed(base_path)
        base = Path(base_path)
        if not base.exists():
            raise PathNotFoundError(str(base_path), "Directory")
        if not base.is_dir():
            raise NotDirectoryError(str(base_path))

        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e))

        results: list[SearchResult] = []
        try:
            for file_path in iter_files(base, recursive):
                if len(results) >= max_results:
                    logger.debug(f"Reached max results ({max_results})")
                    break
                result = self._match_file(base, file_path, regex, search_type)
                if result is not None:
                    results.append(result)
        except OSError as e:
            logger.error(f"Search in {base} failed: {e}")
            raise FileOperationError("searching files", str(base_path), e)

        logger.info(f"Search for {pattern!r} in {base} found {len(results)} file(s)")
        return results

    def _match_file(
        self,
        base: Path,
        file_path: str,
        regex: re.Pattern,
        search_type: SearchType,
    ) -> Optional[SearchResult]:
        relative = os.path.relpath(file_path, base)

        if search_type.checks_name and regex.search(relative):
            return SearchResult(relative, [f"File name matches pattern: {relative}"])

        if search_type.checks_content:
            matches = self._scan_content(file_path, regex)
            if matches:
                return SearchResult(relative, matches)

        return None

    def _scan_content(self, file_path: str, regex: re.Pattern) -> Optional[list[str]]:
        """
        Collect matching lines from one file.

        Returns None when the file can't be read as text, so the caller
        skips it.
        """
        limit = self.config.max_matches_per_file
        matches: list[str] = []
        try:
            with open(file_path, "r", encoding=self.config.encoding, newline="\n") as f:
                for line_number, line in enumerate(f, start=1):
                    if not regex.search(line):
                        continue
                    if len(matches) >= limit:
                        matches.append(
                            f"... more matches found (showing first {limit} only)"
                        )
                        break
                    matches.append(f"Line {line_number}: {line.strip()}")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable file {file_path}: {e}")
            return None
        return matches


def format_results(results: list[SearchResult], pattern: str, base_path: str) -> str:
    """Render search results as the text returned to the caller."""
    if not results:
        return f"No matches found for pattern '{pattern}' in '{base_path}'"

    text = f"Found {len(results)} matching files in '{base_path}':\n\n"
    for result in results:
        text += f"File: {result.relative_path}\n"
        text += "\n".join(f"  {match}" for match in result.matches)
        text += "\n\n"
    return text
