"""MCP stdio server — exposes the tool catalog and forwards calls to the gateway.

stdout carries the protocol; logs go to stderr.
"""
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .config import settings
from .tools import Gateway, ToolCall, registry

logger = logging.getLogger(__name__)

SERVER_NAME = "jira-gateway"

server = Server(SERVER_NAME)

_gateway: Optional[Gateway] = None


def get_gateway() -> Gateway:
    global _gateway
    if _gateway is None:
        _gateway = Gateway(settings)
    return _gateway


def set_gateway(gateway: Optional[Gateway]):
    """Swap the gateway used by the handlers (tests)."""
    global _gateway
    _gateway = gateway


@server.list_tools()
async def list_tools() -> List[types.Tool]:
    return [
        types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema())
        for tool in get_gateway().registry.list()
    ]


# Input validation is done by the gateway so callers get its error text
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
    envelope = await get_gateway().dispatch(ToolCall(name=name, arguments=arguments or {}))
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=envelope.text)],
        isError=envelope.is_error,
    )


async def _run():
    gateway = get_gateway()
    logger.info(f"{SERVER_NAME} ready on stdio ({len(gateway.registry)} tools)")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info(f"{SERVER_NAME} stopped")


if __name__ == "__main__":
    main()
