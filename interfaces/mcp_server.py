"""
MCP Interface - exposes the tool registry over the Model Context Protocol.

Each tool is a typed fastmcp function so the host gets a proper input
schema; argument ranges are enforced here before anything reaches the
registry. Name, title, description and the read-only hint come from the
registry definition. Results carry both the text and the structured
payload; error results are raised as ToolError, which fastmcp turns into
an error response instead of a protocol failure.
"""

import logging
from typing import Annotated, Literal, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult as MCPToolResult
from pydantic import Field

from tools.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "youtube-mcp"

NonEmpty = Annotated[str, Field(min_length=1)]
PageToken = Annotated[Optional[str], Field(description="Token for the next page of results")]
InsightType = Literal["buying_signal", "competitor_move", "sentiment", "trend"]


def build_mcp_server(registry: ToolRegistry) -> FastMCP:
    """FastMCP app whose tools delegate to the registry."""
    mcp = FastMCP(SERVER_NAME)

    def tool(name: str):
        definition = registry.get(name)
        return mcp.tool(
            name=name,
            title=definition.title,
            description=definition.description,
            annotations={"readOnlyHint": definition.read_only},
        )

    async def call(name: str, **arguments) -> MCPToolResult:
        result = await registry.execute(name, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return MCPToolResult(content=result.text, structured_content=result.data)

    @tool("youtube_search_videos")
    async def youtube_search_videos(
        query: Annotated[str, Field(min_length=1, max_length=500, description="Search query")],
        max_results: Annotated[int, Field(ge=1, le=50)] = 10,
        page_token: PageToken = None,
    ) -> MCPToolResult:
        return await call("youtube_search_videos", query=query,
                          max_results=max_results, page_token=page_token)

    @tool("youtube_get_comments")
    async def youtube_get_comments(
        video_id: Annotated[str, Field(min_length=1, description="YouTube video ID")],
        max_results: Annotated[int, Field(ge=1, le=100)] = 50,
        page_token: PageToken = None,
    ) -> MCPToolResult:
        return await call("youtube_get_comments", video_id=video_id,
                          max_results=max_results, page_token=page_token)

    @tool("youtube_get_channel_videos")
    async def youtube_get_channel_videos(
        channel_id: Annotated[str, Field(min_length=1, description="YouTube channel ID (starts with UC)")],
        max_results: Annotated[int, Field(ge=1, le=50)] = 10,
        page_token: PageToken = None,
    ) -> MCPToolResult:
        return await call("youtube_get_channel_videos", channel_id=channel_id,
                          max_results=max_results, page_token=page_token)

    @tool("youtube_search_channels")
    async def youtube_search_channels(
        query: Annotated[str, Field(min_length=1, max_length=200)],
        max_results: Annotated[int, Field(ge=1, le=10)] = 5,
    ) -> MCPToolResult:
        return await call("youtube_search_channels", query=query, max_results=max_results)

    @tool("configure_user")
    async def configure_user(
        industry: Optional[str] = None,
        competitors: Optional[list[str]] = None,
        keywords: Optional[list[str]] = None,
        tracked_channels: Optional[list[str]] = None,
        notes: Optional[list[str]] = None,
    ) -> MCPToolResult:
        return await call("configure_user", industry=industry, competitors=competitors,
                          keywords=keywords, tracked_channels=tracked_channels, notes=notes)

    @tool("add_monitor")
    async def add_monitor(type: Literal["channel", "keyword"], value: NonEmpty) -> MCPToolResult:
        return await call("add_monitor", type=type, value=value)

    @tool("remove_monitor")
    async def remove_monitor(monitor_id: NonEmpty) -> MCPToolResult:
        return await call("remove_monitor", monitor_id=monitor_id)

    @tool("list_agents")
    async def list_agents() -> MCPToolResult:
        return await call("list_agents")

    @tool("get_memory")
    async def get_memory() -> MCPToolResult:
        return await call("get_memory")

    @tool("run_agent")
    async def run_agent(
        agent_id: Literal["competitor-monitor", "sentiment-analyst", "trend-spotter", "lead-qualifier"],
        params: Annotated[
            Optional[dict[str, list[str]]],
            Field(description="channel_ids, keywords and/or video_ids; defaults to the saved profile"),
        ] = None,
    ) -> MCPToolResult:
        return await call("run_agent", agent_id=agent_id, params=params)

    @tool("run_all_agents")
    async def run_all_agents() -> MCPToolResult:
        return await call("run_all_agents")

    @tool("get_insights")
    async def get_insights(
        agent_id: Optional[str] = None,
        type: Optional[InsightType] = None,
        limit: Annotated[int, Field(ge=1, le=100)] = 20,
    ) -> MCPToolResult:
        return await call("get_insights", agent_id=agent_id, type=type, limit=limit)

    @tool("heartbeat")
    async def heartbeat(
        action: Literal["start", "stop", "status"],
        interval_minutes: Annotated[Optional[int], Field(ge=5, le=120)] = None,
    ) -> MCPToolResult:
        return await call("heartbeat", action=action, interval_minutes=interval_minutes)

    logger.info(f"MCP server '{SERVER_NAME}' ready with {len(registry.names())} tools")
    return mcp
