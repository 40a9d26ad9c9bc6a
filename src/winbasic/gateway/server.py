"""
MCP stdio server exposing the gateway tools.

The transport, framing and session handling come from the MCP SDK. This
module only connects its handlers to :class:`GatewayTools` and keeps the
root registry in sync with the client's roots.
"""

import logging
from typing import Any, Optional

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from winbasic import __version__
from winbasic.filesystem.roots import Root, RootRegistry
from winbasic.gateway.models import ToolResponse
from winbasic.gateway.tools import GatewayTools
from winbasic.settings.config import GatewaySettings

logger = logging.getLogger(__name__)


class GatewayServer:
    """
    Wires the MCP server handlers to the gateway tools.

    ``tools/list`` returns the catalog, ``tools/call`` goes through the
    dispatcher, and ``notifications/roots/list_changed`` triggers a
    ``roots/list`` request whose answer replaces the registry's roots.

    Usage:
        server = GatewayServer(GatewaySettings(roots=["C:/projects"]))
        await server.run_stdio()
    """

    def __init__(
        self,
        settings: Optional[GatewaySettings] = None,
        tools: Optional[GatewayTools] = None,
    ):
        self.settings = settings or GatewaySettings()
        self.registry = tools.registry if tools is not None else RootRegistry()
        if tools is None:
            initial = self.settings.initial_roots()
            if initial:
                self.registry.update(initial)
            tools = GatewayTools(self.settings, registry=self.registry)
        self.tools = tools
        self.server: Server = Server(self.settings.server_name, version=__version__)
        # The SDK gives notification handlers no session, so the session of
        # the most recent request is kept for the roots/list round trip.
        self._session: Optional[Any] = None
        self._register_handlers()

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            self._remember_session()
            return [
                types.Tool(
                    name=schema["name"],
                    description=schema["description"],
                    inputSchema=schema["inputSchema"],
                )
                for schema in self.tools.get_tool_schemas()
            ]

        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
            self._remember_session()
            response = await self.tools.execute_tool(name, arguments)
            return to_call_tool_result(response)

        self.server.notification_handlers[types.RootsListChangedNotification] = (
            self._on_roots_list_changed
        )

    def _remember_session(self) -> None:
        try:
            self._session = self.server.request_context.session
        except LookupError:
            pass

    async def _on_roots_list_changed(self, notification: Any) -> None:
        logger.info("Received roots list changed notification")
        if self._session is None:
            logger.warning("No client session available yet; roots left unchanged")
            return
        await self.refresh_roots(self._session)

    async def refresh_roots(self, session: Any) -> bool:
        """
        Ask the client for its roots and replace the registry's snapshot.

        A failed request is logged and the previous roots are kept.

        Returns:
            True if the registry was updated
        """
        try:
            result = await session.list_roots()
        except Exception as e:
            logger.error(f"Error updating roots: {e}")
            return False

        self.registry.update(
            Root(uri=str(root.uri), name=root.name) for root in result.roots
        )
        return True

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        logger.info(
            f"Starting {self.settings.server_name} v{__version__} "
            f"({len(self.registry.current())} initial root(s))"
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def to_call_tool_result(response: ToolResponse) -> types.CallToolResult:
    """Convert the gateway envelope into the SDK's result type."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in response.content],
        isError=bool(response.is_error),
    )
