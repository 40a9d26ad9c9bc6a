"""
Tool catalog and dispatcher.

Maps tool names to operations and turns every outcome, success or
failure, into a :class:`ToolResponse` envelope.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel

from winbasic.filesystem.exceptions import FileSystemError
from winbasic.filesystem.reader import RestrictedFileReader
from winbasic.filesystem.roots import RootRegistry
from winbasic.filesystem.search import RestrictedSearchEngine, format_results
from winbasic.filesystem.writer import RestrictedFileWriter
from winbasic.gateway.models import (
    AppendTextInput,
    ExecuteCommandInput,
    ExecutePowershellInput,
    ListDirectoryInput,
    ReadFileInput,
    SearchFilesInput,
    ToolResponse,
    WriteFileInput,
    WriteLinesInput,
)
from winbasic.settings.config import GatewaySettings
from winbasic.shell.exceptions import CommandExecutionError, ShellError
from winbasic.shell.executor import CommandRunner, RestrictedShell
from winbasic.shell.safety import CommandPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and argument model of one tool."""

    name: str
    description: str
    input_model: type[BaseModel]

    def schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(by_alias=True),
        }


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition("read-file", "Read the contents of a file", ReadFileInput),
    ToolDefinition("write-file", "Write content to a file", WriteFileInput),
    ToolDefinition("write-lines", "Write specific lines to a file", WriteLinesInput),
    ToolDefinition(
        "append-text", "Append text before or after a file's content", AppendTextInput
    ),
    ToolDefinition(
        "search-files",
        "Search files by name or content using regular expressions",
        SearchFilesInput,
    ),
    ToolDefinition("list-directory", "List the contents of a directory", ListDirectoryInput),
    ToolDefinition(
        "execute-command", "Execute a command in the command prompt", ExecuteCommandInput
    ),
    ToolDefinition("execute-powershell", "Execute a PowerShell script", ExecutePowershellInput),
)

Handler = Callable[[dict[str, Any]], Awaitable[ToolResponse]]


class GatewayTools:
    """
    Dispatches tool calls to the restricted filesystem and shell.

    Usage:
        tools = GatewayTools(GatewaySettings())

        # Tool catalog for capability discovery
        schemas = tools.get_tool_schemas()

        # Execute a tool call
        response = await tools.execute_tool(
            "read-file", {"path": "C:/project/main.py", "line_numbers_included": True}
        )
        print(response.to_dict())
    """

    def __init__(
        self,
        settings: Optional[GatewaySettings] = None,
        registry: Optional[RootRegistry] = None,
        runner: Optional[CommandRunner] = None,
        policy: Optional[CommandPolicy] = None,
    ):
        """
        Initialize the tools.

        Args:
            settings: Gateway settings (defaults if omitted)
            registry: Shared root registry (a fresh, unrestricted one if omitted)
            runner: Process runner for the command tools
            policy: Command policy (the configured denylist if omitted)
        """
        self.settings = settings or GatewaySettings()
        self.registry = registry if registry is not None else RootRegistry()
        self.reader = RestrictedFileReader(self.settings.filesystem, self.registry)
        self.writer = RestrictedFileWriter(self.settings.filesystem, self.registry)
        self.search = RestrictedSearchEngine(self.settings.filesystem, self.registry)
        self.shell = RestrictedShell(
            self.settings.shell, self.registry, policy=policy, runner=runner
        )
        self._handlers: dict[str, Handler] = {
            "read-file": self._read_file,
            "write-file": self._write_file,
            "write-lines": self._write_lines,
            "append-text": self._append_text,
            "search-files": self._search_files,
            "list-directory": self._list_directory,
            "execute-command": self._execute_command,
            "execute-powershell": self._execute_powershell,
        }

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        """Return name, description and input schema for every tool."""
        return [definition.schema() for definition in TOOL_DEFINITIONS]

    async def execute_tool(
        self, tool_name: str, arguments: Optional[dict[str, Any]] = None
    ) -> ToolResponse:
        """
        Execute a tool call.

        Never raises: unknown tools, invalid arguments and unexpected
        failures all come back as an error envelope.
        """
        logger.info(f"Tool call: {tool_name}")

        handler = self._handlers.get(tool_name)
        if handler is None:
            logger.warning(f"Unknown tool requested: {tool_name}")
            return ToolResponse.error(f"Tool not found: {tool_name}")

        try:
            return await handler(arguments or {})
        except Exception as e:
            logger.error(f"Tool {tool_name} failed unexpectedly: {e}")
            return ToolResponse.error(f"Error executing tool: {e}")

    async def _read_file(self, arguments: dict[str, Any]) -> ToolResponse:
        args = ReadFileInput.model_validate(arguments)
        try:
            content = await asyncio.to_thread(
                self.reader.read_file, args.path, args.line_numbers_included
            )
        except FileSystemError as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(content)

    async def _write_file(self, arguments: dict[str, Any]) -> ToolResponse:
        args = WriteFileInput.model_validate(arguments)
        try:
            await asyncio.to_thread(
                self.writer.write_file,
                args.path,
                args.content,
                args.create_directories,
                args.line_numbers_included,
            )
        except FileSystemError as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(f"File successfully written to '{args.path}'")

    async def _write_lines(self, arguments: dict[str, Any]) -> ToolResponse:
        args = WriteLinesInput.model_validate(arguments)
        try:
            await asyncio.to_thread(
                self.writer.write_lines, args.path, args.lines, args.create_directories
            )
        except FileSystemError as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(f"File successfully updated at '{args.path}'")

    async def _append_text(self, arguments: dict[str, Any]) -> ToolResponse:
        args = AppendTextInput.model_validate(arguments)
        try:
            await asyncio.to_thread(
                self.writer.append_text,
                args.path,
                args.text,
                args.position,
                args.create_directories,
            )
        except FileSystemError as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(
            f"Text successfully appended {args.position.value} the content in '{args.path}'"
        )

    async def _search_files(self, arguments: dict[str, Any]) -> ToolResponse:
        args = SearchFilesInput.model_validate(arguments)
        try:
            results = await asyncio.to_thread(
                self.search.search,
                args.base_path,
                args.pattern,
                args.search_type,
                args.recursive,
                args.max_results,
            )
        except FileSystemError as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(format_results(results, args.pattern, args.base_path))

    async def _list_directory(self, arguments: dict[str, Any]) -> ToolResponse:
        args = ListDirectoryInput.model_validate(arguments)
        try:
            entries = await asyncio.to_thread(
                self.reader.list_directory, args.path, args.recursive
            )
        except FileSystemError as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(f"Contents of '{args.path}':\n" + "\n".join(entries))

    async def _execute_command(self, arguments: dict[str, Any]) -> ToolResponse:
        args = ExecuteCommandInput.model_validate(arguments)
        try:
            output = await self.shell.execute_command(
                args.command, args.working_dir, args.timeout
            )
        except CommandExecutionError as e:
            logger.warning(f"Command failed: {e.message}")
            return ToolResponse.error(e.render("Error executing command"))
        except (ShellError, FileSystemError) as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(
            output.render("Command executed successfully with no output.")
        )

    async def _execute_powershell(self, arguments: dict[str, Any]) -> ToolResponse:
        args = ExecutePowershellInput.model_validate(arguments)
        try:
            output = await self.shell.execute_powershell(
                args.script, args.working_dir, args.timeout
            )
        except CommandExecutionError as e:
            logger.warning(f"PowerShell script failed: {e.message}")
            return ToolResponse.error(e.render("Error executing PowerShell script"))
        except (ShellError, FileSystemError) as e:
            return ToolResponse.error(str(e))
        return ToolResponse.success(
            output.render("PowerShell script executed successfully with no output.")
        )

    def get_summary(self) -> dict[str, Any]:
        """
        Get a summary of the gateway state.

        Returns:
            Dict with the live roots and the configured limits
        """
        return {
            "roots": [root.model_dump(exclude_none=True) for root in self.registry.current()],
            "unrestricted": not self.registry.current(),
            "tools": [definition.name for definition in TOOL_DEFINITIONS],
            "max_search_results": self.settings.filesystem.max_search_results,
            "max_matches_per_file": self.settings.filesystem.max_matches_per_file,
            "default_timeout_ms": self.settings.shell.default_timeout_ms,
            "blocked_patterns": [p.tag for p in self.settings.shell.blocked_patterns],
        }
