"""
Tool dispatch gateway.

Exposes the filesystem and shell operations as a catalog of named tools,
each returning a uniform response envelope, and serves them over MCP.
"""

from winbasic.gateway.models import TextContent, ToolResponse
from winbasic.gateway.tools import TOOL_DEFINITIONS, GatewayTools, ToolDefinition
from winbasic.gateway.server import GatewayServer, to_call_tool_result

__all__ = [
    "TextContent",
    "ToolResponse",
    "TOOL_DEFINITIONS",
    "GatewayTools",
    "ToolDefinition",
    "GatewayServer",
    "to_call_tool_result",
]
