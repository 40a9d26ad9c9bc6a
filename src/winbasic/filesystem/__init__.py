"""
Root-restricted filesystem access.

This module provides the file operations exposed to remote callers:
reading and line-numbered editing of text files, directory listing and
bounded regex search. Every path is checked against the live root set
held by a :class:`RootRegistry`.
"""

from winbasic.filesystem.config import FileSystemConfig
from winbasic.filesystem.exceptions import (
    FileAccessDeniedError,
    FileOperationError,
    FileSystemError,
    InvalidPatternError,
    NotDirectoryError,
    PathNotFoundError,
)
from winbasic.filesystem.lines import (
    LineMap,
    add_line_numbers,
    parse_line_edits,
    strip_line_numbers,
)
from winbasic.filesystem.roots import Root, RootRegistry, RootSnapshot
from winbasic.filesystem.reader import RestrictedFileReader
from winbasic.filesystem.writer import AppendPosition, RestrictedFileWriter
from winbasic.filesystem.search import (
    RestrictedSearchEngine,
    SearchResult,
    SearchType,
    format_results,
)

__all__ = [
    "FileSystemConfig",
    "FileAccessDeniedError",
    "FileOperationError",
    "FileSystemError",
    "InvalidPatternError",
    "NotDirectoryError",
    "PathNotFoundError",
    "LineMap",
    "add_line_numbers",
    "parse_line_edits",
    "strip_line_numbers",
    "Root",
    "RootRegistry",
    "RootSnapshot",
    "RestrictedFileReader",
    "AppendPosition",
    "RestrictedFileWriter",
    "RestrictedSearchEngine",
    "SearchResult",
    "SearchType",
    "format_results",
]
