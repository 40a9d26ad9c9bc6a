"""
Screened command execution.

Commands are checked against a destructive-command denylist and their
working directory against the root registry before a process is spawned.
"""

from winbasic.shell.config import BlockedPattern, ShellConfig, DEFAULT_BLOCKED_PATTERNS
from winbasic.shell.exceptions import (
    CommandExecutionError,
    DestructiveCommandError,
    ShellError,
)
from winbasic.shell.safety import CommandPolicy, DangerousPattern, DenylistPolicy
from winbasic.shell.executor import (
    CommandOutput,
    CommandRunner,
    RestrictedShell,
    SubprocessRunner,
)

__all__ = [
    "BlockedPattern",
    "ShellConfig",
    "DEFAULT_BLOCKED_PATTERNS",
    "CommandExecutionError",
    "DestructiveCommandError",
    "ShellError",
    "CommandPolicy",
    "DangerousPattern",
    "DenylistPolicy",
    "CommandOutput",
    "CommandRunner",
    "RestrictedShell",
    "SubprocessRunner",
]
