"""
Exceptions for command execution.
"""

from typing import Optional


class ShellError(Exception):
    """Base exception for command execution."""

    pass


class DestructiveCommandError(ShellError):
    """Raised when a command matches the destructive-command denylist."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(
            "Command rejected: The command appears to be potentially destructive."
        )


class CommandExecutionError(ShellError):
    """
    Raised when a spawned process fails.

    Covers non-zero exit, termination by a signal, timeouts and oversized
    output. Whatever the process wrote before failing is preserved.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: Optional[int] = None,
        signal: Optional[str] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.signal = signal
        self.stdout = stdout
        self.stderr = stderr

    def render(self, heading: str) -> str:
        """Format the failure with every diagnostic that is available."""
        text = f"{heading}: {self.message}"
        if self.exit_code is not None:
            text += f"\nExit code: {self.exit_code}"
        if self.signal:
            text += f"\nSignal: {self.signal}"
        if self.stdout:
            text += f"\nSTDOUT:\n{self.stdout}"
        if self.stderr:
            text += f"\nSTDERR:\n{self.stderr}"
        return text
