"""
Windows Basic gateway - file and command tools for remote callers.

This package exposes file reading, line-numbered editing, search and
command execution to an MCP client, confined to the client's roots and
screened against a destructive-command denylist.
"""

__version__ = "0.1.0"

from winbasic.filesystem import (
    FileSystemConfig,
    FileSystemError,
    LineMap,
    RestrictedFileReader,
    RestrictedFileWriter,
    RestrictedSearchEngine,
    Root,
    RootRegistry,
    SearchResult,
    SearchType,
)

from winbasic.shell import (
    CommandExecutionError,
    DenylistPolicy,
    RestrictedShell,
    ShellConfig,
    ShellError,
)

from winbasic.settings import GatewaySettings

from winbasic.gateway import GatewayServer, GatewayTools, ToolResponse

__all__ = [
    # Version
    "__version__",
    # Filesystem
    "FileSystemConfig",
    "FileSystemError",
    "LineMap",
    "RestrictedFileReader",
    "RestrictedFileWriter",
    "RestrictedSearchEngine",
    "Root",
    "RootRegistry",
    "SearchResult",
    "SearchType",
    # Shell
    "CommandExecutionError",
    "DenylistPolicy",
    "RestrictedShell",
    "ShellConfig",
    "ShellError",
    # Settings
    "GatewaySettings",
    # Gateway
    "GatewayServer",
    "GatewayTools",
    "ToolResponse",
]
