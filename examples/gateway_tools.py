"""
Example: Driving the gateway tools without an MCP client

Runs a few tool calls through the dispatcher against a scratch directory,
the same way the stdio server does for a connected client. Useful for
trying out root restrictions and the N:content editing convention.
"""

import asyncio
import json
import tempfile
from pathlib import Path

from winbasic.filesystem import Root, RootRegistry
from winbasic.gateway import GatewayTools


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        workspace = Path(tmpdir)
        registry = RootRegistry([Root.from_path(workspace, name="workspace")])
        tools = GatewayTools(registry=registry)

        notes = str(workspace / "notes.txt")

        calls = [
            ("write-file", {"path": notes, "content": "first\nsecond\nthird"}),
            ("read-file", {"path": notes, "line_numbers_included": True}),
            ("write-lines", {"path": notes, "lines": "2:SECOND\n5:fifth"}),
            ("append-text", {"path": notes, "text": "# notes\n", "position": "before"}),
            ("read-file", {"path": notes}),
            (
                "search-files",
                {"basePath": str(workspace), "pattern": "fifth", "searchType": "content"},
            ),
            ("list-directory", {"path": str(workspace)}),
            # Outside the workspace root
            ("read-file", {"path": str(workspace.parent / "elsewhere.txt")}),
            # Rejected by the denylist before anything is spawned
            ("execute-command", {"command": "rm -rf /"}),
            ("execute-command", {"command": "echo hello", "workingDir": str(workspace)}),
        ]

        for name, arguments in calls:
            response = await tools.execute_tool(name, arguments)
            print(f"--- {name} ---")
            print(json.dumps(response.to_dict(), indent=2))

        print("--- summary ---")
        print(json.dumps(tools.get_summary(), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
