"""
Tests for the command denylist and screened execution.
"""

import sys
from unittest.mock import AsyncMock

import pytest

from winbasic.filesystem import FileAccessDeniedError, Root, RootRegistry
from winbasic.shell import (
    BlockedPattern,
    CommandExecutionError,
    CommandOutput,
    DenylistPolicy,
    DestructiveCommandError,
    RestrictedShell,
    ShellConfig,
    SubprocessRunner,
)


@pytest.fixture
def policy():
    """Create the default denylist."""
    return DenylistPolicy()


@pytest.fixture
def runner():
    """Create a mock runner that succeeds with some output."""
    mock = AsyncMock()
    mock.run.return_value = CommandOutput(stdout="done")
    return mock


@pytest.fixture
def restricted_registry():
    """Create a registry restricted to a Windows drive root."""
    return RootRegistry([Root(uri="file:///C:/allowed")])


@pytest.fixture
def shell(runner):
    """Create an unrestricted RestrictedShell backed by the mock runner."""
    return RestrictedShell(ShellConfig(), RootRegistry(), runner=runner)


class TestDenylistPolicy:
    """Test DenylistPolicy."""

    @pytest.mark.parametrize(
        "command",
        [
            "rm -rf /",
            "rm  -rf \\",
            "sudo rm -rf /var",
            "format c:",
            "FORMAT D:",
            "deltree /",
            "rd /s /q c:",
            "echo hi && rd /s /q C:\\",
        ],
    )
    def test_destructive_commands(self, policy, command):
        """Test that the known destructive forms are rejected."""
        assert policy.is_dangerous(command)

    @pytest.mark.parametrize(
        "command",
        ["dir", "ls -la", "rm -rf ./build", "rd /s /q build", "echo format"],
    )
    def test_safe_commands(self, policy, command):
        """Test that ordinary commands pass."""
        assert not policy.is_dangerous(command)

    def test_match_returns_tag(self, policy):
        """Test that the matching entry is reported."""
        assert policy.match("format c:").tag == "format-drive"
        assert policy.match("dir") is None

    def test_custom_patterns(self):
        """Test a configured denylist."""
        policy = DenylistPolicy([BlockedPattern(tag="shutdown", pattern=r"shutdown\s")])

        assert policy.is_dangerous("shutdown /s")
        assert not policy.is_dangerous("rm -rf /")

    def test_invalid_pattern_rejected(self):
        """Test that uncompilable patterns fail validation."""
        with pytest.raises(ValueError):
            BlockedPattern(tag="bad", pattern="(unclosed")


class TestCommandOutput:
    """Test rendering process output."""

    def test_render_both_streams(self):
        """Test stdout and stderr sections."""
        output = CommandOutput(stdout="out", stderr="err")
        assert output.render("none") == "STDOUT:\nout\nSTDERR:\nerr\n"

    def test_render_stdout_only(self):
        """Test omitting an empty stream."""
        assert CommandOutput(stdout="out").render("none") == "STDOUT:\nout\n"

    def test_render_empty(self):
        """Test the fallback message."""
        assert CommandOutput().render("no output") == "no output"


class TestCommandExecutionError:
    """Test CommandExecutionError."""

    def test_render_exit_code(self):
        """Test rendering a non-zero exit with partial output."""
        error = CommandExecutionError(
            "Command failed: build", exit_code=2, stdout="partial", stderr="boom"
        )

        assert error.render("Error executing command") == (
            "Error executing command: Command failed: build\n"
            "Exit code: 2\n"
            "STDOUT:\npartial\n"
            "STDERR:\nboom"
        )

    def test_render_signal(self):
        """Test rendering a signal termination."""
        error = CommandExecutionError("Command timed out after 10ms: x", signal="SIGTERM")

        assert error.render("Error") == (
            "Error: Command timed out after 10ms: x\nSignal: SIGTERM"
        )


class TestRestrictedShell:
    """Test RestrictedShell with a mock runner."""

    @pytest.mark.asyncio
    async def test_execute_command(self, shell, runner):
        """Test that allowed commands reach the runner with defaults."""
        output = await shell.execute_command("dir")

        assert output.stdout == "done"
        runner.run.assert_awaited_once_with(
            "dir",
            timeout_ms=30_000,
            cwd=None,
            max_output_bytes=10 * 1024 * 1024,
        )

    @pytest.mark.asyncio
    async def test_explicit_timeout_and_cwd(self, shell, runner):
        """Test passing the caller's timeout and working directory."""
        await shell.execute_command("dir", working_dir="C:/work", timeout_ms=500)

        kwargs = runner.run.await_args.kwargs
        assert kwargs["timeout_ms"] == 500
        assert kwargs["cwd"] == "C:/work"

    @pytest.mark.asyncio
    async def test_destructive_command_not_spawned(self, shell, runner):
        """Test that rejected commands never reach the runner."""
        with pytest.raises(DestructiveCommandError) as exc_info:
            await shell.execute_command("rm -rf /")

        assert "potentially destructive" in str(exc_info.value)
        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_working_dir_outside_roots(self, restricted_registry, runner):
        """Test that the working directory must be inside the roots."""
        shell = RestrictedShell(ShellConfig(), restricted_registry, runner=runner)

        with pytest.raises(FileAccessDeniedError) as exc_info:
            await shell.execute_command("dir", working_dir="C:/restricted")

        assert "Access denied" in str(exc_info.value)
        assert "working directory" in str(exc_info.value)
        runner.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_working_dir_inside_roots(self, restricted_registry, runner):
        """Test that a permitted working directory is accepted."""
        shell = RestrictedShell(ShellConfig(), restricted_registry, runner=runner)

        await shell.execute_command("dir", working_dir="C:/allowed/project")

        runner.run.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_execute_powershell(self, shell, runner):
        """Test wrapping a script for PowerShell."""
        await shell.execute_powershell("Write-Output 'Hello'")

        command = runner.run.await_args.args[0]
        assert command == (
            "powershell -NoProfile -ExecutionPolicy Bypass "
            "-Command \"Write-Output ''Hello''\""
        )

    @pytest.mark.asyncio
    async def test_destructive_powershell_not_spawned(self, shell, runner):
        """Test that scripts are screened too."""
        with pytest.raises(DestructiveCommandError):
            await shell.execute_powershell("cmd /c rd /s /q c:\\")

        runner.run.assert_not_awaited()

    def test_custom_powershell_executable(self, runner):
        """Test using pwsh instead of Windows PowerShell."""
        shell = RestrictedShell(
            ShellConfig(powershell_executable="pwsh"), RootRegistry(), runner=runner
        )

        assert shell.build_powershell_command("Get-Date").startswith("pwsh -NoProfile")

    @pytest.mark.asyncio
    async def test_runner_failure_propagates(self, shell, runner):
        """Test that process failures reach the caller intact."""
        runner.run.side_effect = CommandExecutionError(
            "Command failed: build", exit_code=1, stderr="boom"
        )

        with pytest.raises(CommandExecutionError) as exc_info:
            await shell.execute_command("build")

        assert exc_info.value.exit_code == 1
        assert exc_info.value.stderr == "boom"


class TestSubprocessRunner:
    """Test SubprocessRunner against real processes."""

    @pytest.mark.asyncio
    async def test_echo(self):
        """Test capturing stdout."""
        output = await SubprocessRunner().run(
            "echo hello", timeout_ms=10_000, max_output_bytes=1024
        )

        assert "hello" in output.stdout

    @pytest.mark.asyncio
    async def test_non_zero_exit(self):
        """Test that a failing command reports its exit code."""
        with pytest.raises(CommandExecutionError) as exc_info:
            await SubprocessRunner().run("exit 3", timeout_ms=10_000, max_output_bytes=1024)

        assert exc_info.value.exit_code == 3
        assert exc_info.value.message == "Command failed: exit 3"

    @pytest.mark.asyncio
    async def test_working_directory(self, tmp_path):
        """Test running inside a given directory."""
        (tmp_path / "marker.txt").write_text("x")
        command = "dir /b" if sys.platform == "win32" else "ls"

        output = await SubprocessRunner().run(
            command, timeout_ms=10_000, cwd=str(tmp_path), max_output_bytes=4096
        )

        assert "marker.txt" in output.stdout

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX sleep")
    async def test_timeout(self):
        """Test that a slow command is terminated."""
        with pytest.raises(CommandExecutionError) as exc_info:
            await SubprocessRunner().run("sleep 5", timeout_ms=200, max_output_bytes=1024)

        assert "timed out after 200ms" in exc_info.value.message
        assert exc_info.value.signal == "SIGTERM"

    @pytest.mark.asyncio
    async def test_output_limit(self):
        """Test that oversized output is cut off."""
        with pytest.raises(CommandExecutionError) as exc_info:
            await SubprocessRunner().run(
                "echo 0123456789", timeout_ms=10_000, max_output_bytes=4
            )

        assert exc_info.value.message == "stdout maxBuffer length exceeded"
        assert exc_info.value.stdout == "0123"
