"""
Destructive-command denylist.

This is a best-effort filter, not a sandbox. Commands are matched as raw
strings against a fixed list of patterns; shell grammar is not parsed, so
a command built through variable expansion, aliases or chaining can slip
past it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from winbasic.shell.config import DEFAULT_BLOCKED_PATTERNS, BlockedPattern

logger = logging.getLogger(__name__)


class CommandPolicy(Protocol):
    """Decides whether a command string may run."""

    def is_dangerous(self, command: str) -> bool:
        """Return True if the command must be rejected."""
        ...


@dataclass(frozen=True)
class DangerousPattern:
    """A compiled denylist entry."""

    tag: str
    regex: re.Pattern

    @classmethod
    def from_config(cls, blocked: BlockedPattern) -> "DangerousPattern":
        return cls(tag=blocked.tag, regex=re.compile(blocked.pattern, re.IGNORECASE))


class DenylistPolicy:
    """
    Rejects commands that match any of an ordered list of patterns.

    Usage:
        policy = DenylistPolicy()
        policy.is_dangerous("rm -rf /")   # True
        policy.is_dangerous("dir")        # False
    """

    def __init__(self, patterns: Optional[Iterable[BlockedPattern]] = None):
        if patterns is None:
            patterns = DEFAULT_BLOCKED_PATTERNS
        self.patterns = tuple(DangerousPattern.from_config(p) for p in patterns)

    def match(self, command: str) -> Optional[DangerousPattern]:
        """Return the first pattern the command matches, if any."""
        for pattern in self.patterns:
            if pattern.regex.search(command):
                return pattern
        return None

    def is_dangerous(self, command: str) -> bool:
        pattern = self.match(command)
        if pattern is None:
            return False
        logger.warning(f"Command matched denylist entry {pattern.tag}: {command!r}")
        return True

    def __repr__(self) -> str:
        return f"DenylistPolicy(tags={[p.tag for p in self.patterns]})"
