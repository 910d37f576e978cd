from __future__ import annotations

import asyncio
from pathlib import Path

from fastmcp import Client

from agents.orchestrator import AgentOrchestrator
from core.heartbeat import Heartbeat
from core.memory import MemoryStore
from fakes import FakeYouTube
from interfaces.mcp_server import build_mcp_server
from tools.tool_registry import build_registry


def test_every_registered_tool_is_exposed(tmp_path: Path) -> None:
    youtube = FakeYouTube()
    store = MemoryStore(tmp_path / "memory.json")
    orchestrator = AgentOrchestrator(youtube, store)
    registry = build_registry(youtube, store, orchestrator, Heartbeat(orchestrator, store))
    mcp = build_mcp_server(registry)

    async def scenario():
        async with Client(mcp) as client:
            return await client.list_tools()

    tools = {tool.name: tool for tool in asyncio.run(scenario())}

    assert set(tools) == set(registry.names())
    heartbeat_schema = tools["heartbeat"].inputSchema
    assert heartbeat_schema["required"] == ["action"]
    assert heartbeat_schema["properties"]["action"]["enum"] == ["start", "stop", "status"]


def test_tools_carry_registry_title_and_read_only_hint(tmp_path: Path) -> None:
    mcp, registry = _server(tmp_path)

    async def scenario():
        async with Client(mcp) as client:
            return await client.list_tools()

    tools = {tool.name: tool for tool in asyncio.run(scenario())}

    assert tools["youtube_search_videos"].title == "Search YouTube Videos"
    assert tools["youtube_search_videos"].description == registry.get("youtube_search_videos").description
    assert tools["youtube_search_videos"].annotations.readOnlyHint is True
    assert tools["get_insights"].annotations.readOnlyHint is True
    assert tools["add_monitor"].annotations.readOnlyHint is False


def test_structured_payload_reaches_the_client(tmp_path: Path) -> None:
    mcp, _ = _server(tmp_path)

    async def scenario():
        async with Client(mcp) as client:
            added = await client.call_tool("add_monitor", {"type": "keyword", "value": "CRM review"})
            status = await client.call_tool("heartbeat", {"action": "status"})
            return added, status

    added, status = asyncio.run(scenario())

    assert added.content[0].text.startswith('Monitor added: [keyword] "CRM review"')
    assert added.structured_content["value"] == "CRM review"
    assert added.structured_content["id"].startswith("mon_")
    assert status.structured_content == {
        "running": False,
        "interval_minutes": None,
        "last_tick_at": None,
        "tick_count": 0,
    }


def _server(tmp_path: Path):
    youtube = FakeYouTube()
    store = MemoryStore(tmp_path / "memory.json")
    orchestrator = AgentOrchestrator(youtube, store)
    registry = build_registry(youtube, store, orchestrator, Heartbeat(orchestrator, store))
    return build_mcp_server(registry), registry
