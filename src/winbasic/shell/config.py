"""
Configuration for command execution.
"""

import re

from pydantic import BaseModel, Field, field_validator


class BlockedPattern(BaseModel):
    """A tagged regular expression describing a destructive invocation."""

    tag: str = Field(description="Short identifier used in logs")
    pattern: str = Field(description="Regular expression, matched case-insensitively")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Make sure the pattern compiles."""
        try:
            re.compile(v, re.IGNORECASE)
        except re.error as e:
            raise ValueError(f"Invalid blocked pattern {v!r}: {e}")
        return v


DEFAULT_BLOCKED_PATTERNS = [
    BlockedPattern(tag="rm-rf-root", pattern=r"rm\s+-rf\s+[\/\\]"),
    BlockedPattern(tag="format-drive", pattern=r"format\s+[a-z]:"),
    BlockedPattern(tag="deltree-root", pattern=r"deltree\s+[\/\\]"),
    BlockedPattern(tag="rd-drive", pattern=r"rd\s+\/s\s+\/q\s+[a-z]:"),
]


class ShellConfig(BaseModel):
    """
    Configuration for the command and PowerShell tools.

    Example:
        ```python
        config = ShellConfig(
            default_timeout_ms=10_000,
            powershell_executable="pwsh",
        )
        ```
    """

    default_timeout_ms: int = Field(
        default=30_000,
        ge=0,
        description="Timeout applied when the caller gives none (0 = no timeout)",
    )

    max_output_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Largest stdout or stderr accepted from a process",
    )

    powershell_executable: str = Field(
        default="powershell",
        description="Executable used by execute-powershell",
    )

    blocked_patterns: list[BlockedPattern] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_PATTERNS),
        description="Denylist evaluated in order before any command runs",
    )
