# src/server/mcp_server.py

"""MCP server exposing today's deals as a single tool over SSE."""

import logging

import simplejson
from mcp.server.fastmcp import FastMCP

from src.config.settings import Settings
from src.services.deals_service import DealsService

logger = logging.getLogger("daily_deals.mcp")


async def get_deals_json(service: DealsService) -> str:
    """Run the pipeline and return the result as JSON text."""
    resp = await service.fetch_offers()
    return simplejson.dumps(
        resp.to_dict(), ensure_ascii=False, use_decimal=True
    )


def create_mcp_server(service: DealsService | None = None) -> FastMCP:
    """Build a FastMCP server with the deals tool registered."""
    deals = service or DealsService()
    mcp = FastMCP(
        Settings.MCP_SERVER_NAME,
        host=Settings.HOST,
        port=Settings.PORT,
    )

    @mcp.tool(
        name=Settings.MCP_TOOL_NAME,
        description=Settings.MCP_TOOL_DESCRIPTION,
    )
    async def get_big_watermelon_deals() -> str:
        logger.info("Tool '%s' called", Settings.MCP_TOOL_NAME)
        return await get_deals_json(deals)

    return mcp


def run_mcp_server() -> None:
    """Serve the MCP tool over SSE (``/sse`` and ``/messages/``)."""
    mcp = create_mcp_server()
    logger.info(
        "Starting MCP SSE server on %s:%d", Settings.HOST, Settings.PORT
    )
    mcp.run(transport="sse")
