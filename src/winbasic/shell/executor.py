"""
Command execution behind the denylist and the root registry.
"""

import asyncio
import logging
import signal
from dataclasses import dataclass
from typing import Optional, Protocol

from winbasic.filesystem.roots import RootRegistry
from winbasic.shell.config import ShellConfig
from winbasic.shell.exceptions import CommandExecutionError, DestructiveCommandError
from winbasic.shell.safety import CommandPolicy, DenylistPolicy

logger = logging.getLogger(__name__)

_READ_CHUNK = 64 * 1024


@dataclass
class CommandOutput:
    """Captured output of a successful process."""

    stdout: str = ""
    stderr: str = ""

    def render(self, empty_message: str) -> str:
        text = ""
        if self.stdout:
            text += f"STDOUT:\n{self.stdout}\n"
        if self.stderr:
            text += f"STDERR:\n{self.stderr}\n"
        return text or empty_message


class CommandRunner(Protocol):
    """Spawns a shell command and collects its output."""

    async def run(
        self,
        command: str,
        *,
        timeout_ms: int,
        cwd: Optional[str] = None,
        max_output_bytes: int,
    ) -> CommandOutput:
        """Run ``command``, raising CommandExecutionError on failure."""
        ...


class _OutputLimitExceeded(Exception):
    def __init__(self, stream: str):
        self.stream = stream
        super().__init__(f"{stream} maxBuffer length exceeded")


class SubprocessRunner:
    """
    CommandRunner backed by ``asyncio.create_subprocess_shell``.

    On timeout or oversized output the child is terminated; whatever it
    had written so far is attached to the raised error.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def run(
        self,
        command: str,
        *,
        timeout_ms: int,
        cwd: Optional[str] = None,
        max_output_bytes: int,
    ) -> CommandOutput:
        logger.debug(f"Running command (timeout={timeout_ms}ms, cwd={cwd}): {command}")

        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            raise CommandExecutionError(f"Failed to start command: {e}")

        stdout_buf = bytearray()
        stderr_buf = bytearray()
        tasks = [
            asyncio.ensure_future(
                self._drain(proc.stdout, stdout_buf, max_output_bytes, "stdout")
            ),
            asyncio.ensure_future(
                self._drain(proc.stderr, stderr_buf, max_output_bytes, "stderr")
            ),
        ]
        timeout = timeout_ms / 1000 if timeout_ms > 0 else None

        try:
            await asyncio.wait_for(asyncio.gather(*tasks, proc.wait()), timeout=timeout)
        except asyncio.TimeoutError:
            await self._terminate(proc)
            raise CommandExecutionError(
                f"Command timed out after {timeout_ms}ms: {command}",
                signal="SIGTERM",
                stdout=self._decode(stdout_buf),
                stderr=self._decode(stderr_buf),
            )
        except _OutputLimitExceeded as e:
            await self._terminate(proc)
            raise CommandExecutionError(
                str(e),
                signal="SIGTERM",
                stdout=self._decode(stdout_buf),
                stderr=self._decode(stderr_buf),
            )
        finally:
            for task in tasks:
                task.cancel()

        stdout = self._decode(stdout_buf)
        stderr = self._decode(stderr_buf)
        returncode = proc.returncode

        if returncode is not None and returncode < 0:
            raise CommandExecutionError(
                f"Command failed: {command}",
                signal=_signal_name(-returncode),
                stdout=stdout,
                stderr=stderr,
            )
        if returncode:
            raise CommandExecutionError(
                f"Command failed: {command}",
                exit_code=returncode,
                stdout=stdout,
                stderr=stderr,
            )

        return CommandOutput(stdout=stdout, stderr=stderr)

    async def _drain(
        self,
        stream: Optional[asyncio.StreamReader],
        buffer: bytearray,
        limit: int,
        name: str,
    ) -> None:
        if stream is None:
            return
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                return
            buffer.extend(chunk)
            if len(buffer) > limit:
                del buffer[limit:]
                raise _OutputLimitExceeded(name)

    async def _terminate(self, proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.terminate()
            except ProcessLookupError:
                pass
        await proc.wait()

    def _decode(self, data: bytearray) -> str:
        return bytes(data).decode(self.encoding, errors="replace")


def _signal_name(number: int) -> str:
    try:
        return signal.Signals(number).name
    except ValueError:
        return f"SIG{number}"


class RestrictedShell:
    """
    Runs commands and PowerShell scripts after the safety checks.

    A command is screened by the policy first, then its working directory
    is checked against the root registry; only then is anything spawned.

    Usage:
        shell = RestrictedShell(ShellConfig(), registry)
        output = await shell.execute_command("dir", working_dir="C:/project")
        print(output.render("no output"))
    """

    def __init__(
        self,
        config: ShellConfig,
        registry: RootRegistry,
        policy: Optional[CommandPolicy] = None,
        runner: Optional[CommandRunner] = None,
    ):
        self.config = config
        self.registry = registry
        self.policy = policy or DenylistPolicy(config.blocked_patterns)
        self.runner = runner or SubprocessRunner()

    async def execute_command(
        self,
        command: str,
        working_dir: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> CommandOutput:
        """
        Run a shell command.

        Raises:
            DestructiveCommandError: If the policy rejects the command
            FileAccessDeniedError: If ``working_dir`` is outside the roots
            CommandExecutionError: If the process fails or times out
        """
        self._screen(command)
        return await self._run(command, working_dir, timeout_ms)

    async def execute_powershell(
        self,
        script: str,
        working_dir: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> CommandOutput:
        """
        Run a PowerShell script through ``-Command``.

        Single quotes in the script are doubled before it is wrapped.

        Raises:
            DestructiveCommandError: If the policy rejects the script
            FileAccessDeniedError: If ``working_dir`` is outside the roots
            CommandExecutionError: If the process fails or times out
        """
        self._screen(script)
        return await self._run(self.build_powershell_command(script), working_dir, timeout_ms)

    def build_powershell_command(self, script: str) -> str:
        escaped = script.replace("'", "''")
        return (
            f"{self.config.powershell_executable} -NoProfile "
            f'-ExecutionPolicy Bypass -Command "{escaped}"'
        )

    def _screen(self, command: str) -> None:
        if self.policy.is_dangerous(command):
            raise DestructiveCommandError(command)

    async def _run(
        self, command: str, working_dir: Optional[str], timeout_ms: Optional[int]
    ) -> CommandOutput:
        if working_dir:
            self.registry.require_allowed(working_dir, subject="working directory")

        if timeout_ms is None:
            timeout_ms = self.config.default_timeout_ms

        output = await self.runner.run(
            command,
            timeout_ms=timeout_ms,
            cwd=working_dir or None,
            max_output_bytes=self.config.max_output_bytes,
        )
        logger.info(f"Command completed: {command}")
        return output
