"""
Tool registration and execution.

Every capability the agent host can call is a ToolDefinition with an
async execute function. ToolRegistry.execute never raises: failures come
back as error results carrying the message, so the host can show them.

Parameter validation happens at the protocol layer (interfaces/mcp_server.py);
handlers here trust their inputs.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable, Optional

from agents.orchestrator import AgentOrchestrator
from core.heartbeat import Heartbeat
from core.memory.store import MemoryStore

logger = logging.getLogger(__name__)

INSIGHTS_SHOWN_IN_MEMORY = 5


@dataclass
class ToolResult:
    """Human-readable text plus optional structured payload."""
    text: str
    data: Optional[dict] = None
    is_error: bool = False


@dataclass
class ToolDefinition:
    """Definition of a tool the host can call."""
    name: str
    title: str
    description: str
    execute_fn: Callable[..., Awaitable[ToolResult]]
    read_only: bool = False


class ToolRegistry:
    """Name -> tool lookup with uniform error handling."""

    def __init__(self):
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition):
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    async def execute(self, name: str, arguments: Optional[dict] = None) -> ToolResult:
        """Execute a tool by name. Exceptions become error results."""
        tool = self._tools.get(name)
        if not tool:
            return ToolResult(text=f"Error: Tool '{name}' not found", is_error=True)
        try:
            return await tool.execute_fn(**(arguments or {}))
        except Exception as e:
            logger.error(f"Tool execution failed: {name} - {e}")
            return ToolResult(text=f"Error: {e}", is_error=True)


# --- Formatting ---

def _day(timestamp: Optional[str]) -> str:
    return (timestamp or "").split("T")[0]


def _clip(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def _indent(detail: str) -> str:
    return detail.replace("\n", "\n   ")


def format_videos(query: str, total: int, videos: list, next_page_token: Optional[str]) -> str:
    text = f'Found {total} videos for "{query}" (showing {len(videos)})\n\n'
    for i, v in enumerate(videos, 1):
        text += f"{i}. {v.title}\n"
        text += f"   Channel: {v.channel_title}\n"
        text += f"   Published: {_day(v.published_at)}\n"
        text += f"   URL: {v.url}\n"
        text += f"   Video ID: {v.video_id}\n\n"
    if next_page_token:
        text += f'\nMore results available. Use page_token: "{next_page_token}" to get next page.'
    return text


def format_comments(video_id: str, total: int, comments: list, next_page_token: Optional[str]) -> str:
    text = f"Comments for video: https://youtube.com/watch?v={video_id}\n"
    text += f"Total: {total} | Showing: {len(comments)}\n\n"
    for i, c in enumerate(comments, 1):
        text += f"{i}. [{c.like_count} likes, {c.reply_count} replies] {c.author_name}:\n"
        text += f'   "{c.text}"\n\n'
    if next_page_token:
        text += f'\nMore comments available. Use page_token: "{next_page_token}" to get next page.'
    return text


def format_channel_videos(channel_title: str, videos: list, next_page_token: Optional[str]) -> str:
    text = f"Recent videos from {channel_title} ({len(videos)} videos)\n\n"
    for i, v in enumerate(videos, 1):
        text += f"{i}. {v.title}\n"
        text += f"   Published: {_day(v.published_at)}\n"
        text += f"   URL: {v.url}\n"
        text += f"   Video ID: {v.video_id}\n\n"
    if next_page_token:
        text += f'\nMore videos available. Use page_token: "{next_page_token}" to get next page.'
    return text


def format_channels(query: str, channels: list) -> str:
    text = f'Found {len(channels)} channels for "{query}"\n\n'
    for i, c in enumerate(channels, 1):
        text += f"{i}. {c.title}\n"
        text += f"   Channel ID: {c.channel_id}\n"
        text += f"   URL: {c.url}\n"
        text += f"   Description: {_clip(c.description, 150)}\n\n"
    return text


def _or_none(values: list[str], sep: str = ", ") -> str:
    return sep.join(values) if values else "(none)"


def build_registry(youtube, store: MemoryStore, orchestrator: AgentOrchestrator,
                   heartbeat: Heartbeat,
                   default_interval_minutes: int = 30) -> ToolRegistry:
    """Register every tool against the given components."""
    registry = ToolRegistry()

    # --- YouTube Tools ---

    async def search_videos_execute(query: str, max_results: int = 10,
                                    page_token: Optional[str] = None) -> ToolResult:
        result = await youtube.search_videos(query, max_results, page_token)
        videos = [
            {
                "video_id": v.video_id,
                "title": v.title,
                "description": _clip(v.description, 200),
                "channel_title": v.channel_title,
                "published_at": v.published_at,
                "url": v.url,
            }
            for v in result.videos
        ]
        data = {
            "query": query,
            "total_results": result.total_results,
            "returned_count": len(videos),
            "videos": videos,
            "next_page_token": result.next_page_token,
        }
        text = format_videos(query, result.total_results, result.videos, result.next_page_token)
        return ToolResult(text=text, data=data)

    registry.register(ToolDefinition(
        name="youtube_search_videos",
        title="Search YouTube Videos",
        description=(
            "Search YouTube for videos matching a query. Use for finding competitor "
            "content, product reviews, industry discussions, and buyer intent signals. "
            "Returns videoId, title, description, channelTitle, publishedAt and a "
            "page token when more results exist."
        ),
        execute_fn=search_videos_execute,
        read_only=True,
    ))

    async def get_comments_execute(video_id: str, max_results: int = 50,
                                   page_token: Optional[str] = None) -> ToolResult:
        result = await youtube.get_video_comments(video_id, max_results, page_token)
        data = {
            "video_id": video_id,
            "video_url": f"https://youtube.com/watch?v={video_id}",
            "total_comments": result.total_results,
            "returned_count": len(result.comments),
            "comments": [asdict(c) for c in result.comments],
            "next_page_token": result.next_page_token,
        }
        text = format_comments(video_id, result.total_results, result.comments, result.next_page_token)
        return ToolResult(text=text, data=data)

    registry.register(ToolDefinition(
        name="youtube_get_comments",
        title="Get YouTube Video Comments",
        description=(
            "Fetch comments from a specific YouTube video. This is where the real "
            "insights are: what people actually think about products, competitors, "
            "and problems."
        ),
        execute_fn=get_comments_execute,
        read_only=True,
    ))

    async def channel_videos_execute(channel_id: str, max_results: int = 10,
                                     page_token: Optional[str] = None) -> ToolResult:
        result = await youtube.get_channel_videos(channel_id, max_results, page_token)
        data = {
            "channel_id": channel_id,
            "channel_title": result.channel_title,
            "returned_count": len(result.videos),
            "videos": [
                {
                    "video_id": v.video_id,
                    "title": v.title,
                    "description": _clip(v.description, 200),
                    "published_at": v.published_at,
                    "url": v.url,
                }
                for v in result.videos
            ],
            "next_page_token": result.next_page_token,
        }
        text = format_channel_videos(result.channel_title, result.videos, result.next_page_token)
        return ToolResult(text=text, data=data)

    registry.register(ToolDefinition(
        name="youtube_get_channel_videos",
        title="Get YouTube Channel Videos",
        description=(
            "Get recent videos from a specific YouTube channel. Use to monitor "
            "competitor channels or industry influencers."
        ),
        execute_fn=channel_videos_execute,
        read_only=True,
    ))

    async def search_channels_execute(query: str, max_results: int = 5) -> ToolResult:
        channels = await youtube.search_channels(query, max_results)
        data = {
            "query": query,
            "returned_count": len(channels),
            "channels": [
                {
                    "channel_id": c.channel_id,
                    "title": c.title,
                    "description": _clip(c.description, 150),
                    "channel_url": c.url,
                }
                for c in channels
            ],
        }
        return ToolResult(text=format_channels(query, channels), data=data)

    registry.register(ToolDefinition(
        name="youtube_search_channels",
        title="Search YouTube Channels",
        description=(
            "Search for YouTube channels by name. Use this to find channel IDs "
            "for competitors or industry influencers."
        ),
        execute_fn=search_channels_execute,
        read_only=True,
    ))

    # --- Profile & Monitors ---

    async def configure_user_execute(industry: Optional[str] = None,
                                     competitors: Optional[list[str]] = None,
                                     keywords: Optional[list[str]] = None,
                                     tracked_channels: Optional[list[str]] = None,
                                     notes: Optional[list[str]] = None) -> ToolResult:
        supplied = {
            k: v for k, v in {
                "industry": industry,
                "competitors": competitors,
                "keywords": keywords,
                "tracked_channels": tracked_channels,
                "notes": notes,
            }.items() if v is not None
        }
        user = await store.update_profile(**supplied)
        await store.add_conversation(role="user", content=f"Configured profile: {json.dumps(supplied)}")

        text = "\n".join([
            "User profile updated:",
            f"  Industry: {user.industry or '(not set)'}",
            f"  Competitors: {_or_none(user.competitors)}",
            f"  Keywords: {_or_none(user.keywords)}",
            f"  Tracked Channels: {_or_none(user.tracked_channels)}",
            f"  Notes: {_or_none(user.notes, '; ')}",
        ])
        return ToolResult(text=text, data=asdict(user))

    registry.register(ToolDefinition(
        name="configure_user",
        title="Configure User Profile",
        description=(
            "Set up your profile so agents know what to monitor: industry, "
            "competitors, keywords, tracked channel IDs and notes. Only the fields "
            "you pass are changed; a list you pass replaces the stored list."
        ),
        execute_fn=configure_user_execute,
    ))

    async def add_monitor_execute(type: str, value: str) -> ToolResult:
        monitor = await store.add_monitor(type, value)
        text = f'Monitor added: [{monitor.type}] "{monitor.value}" (id: {monitor.id})'
        return ToolResult(text=text, data=asdict(monitor))

    registry.register(ToolDefinition(
        name="add_monitor",
        title="Add Monitor Target",
        description=(
            "Add a channel or keyword to the monitoring list. Monitored targets are "
            "checked on every heartbeat. Adding the same target twice is a no-op."
        ),
        execute_fn=add_monitor_execute,
    ))

    async def remove_monitor_execute(monitor_id: str) -> ToolResult:
        removed = await store.remove_monitor(monitor_id)
        text = f"Monitor {monitor_id} removed." if removed else f"No monitor with id {monitor_id}."
        return ToolResult(text=text, data={"removed": removed})

    registry.register(ToolDefinition(
        name="remove_monitor",
        title="Remove Monitor Target",
        description="Remove a monitor target by its id (see get_memory).",
        execute_fn=remove_monitor_execute,
    ))

    # --- Agents ---

    async def list_agents_execute() -> ToolResult:
        agents = orchestrator.list_agents()
        text = f"Agents ({len(agents)}):\n"
        for a in agents:
            text += f"\n- {a['name']} ({a['id']})\n"
            text += f"  Role: {a['role']}\n"
            text += f"  Skills: {', '.join(a['skills'])}\n"
            text += f"  Thinking style: {a['soul']['thinking_style']}\n"
        return ToolResult(text=text, data={"agents": agents})

    registry.register(ToolDefinition(
        name="list_agents",
        title="List Agents",
        description="Describe the available agents: role, skills and working style.",
        execute_fn=list_agents_execute,
        read_only=True,
    ))

    async def run_agent_execute(agent_id: str, params: Optional[dict] = None) -> ToolResult:
        agent_params = params or {}
        if not agent_params:
            agent_params = await orchestrator.profile_params()

        result = await orchestrator.run_agent(agent_id, agent_params)
        await store.add_conversation(role="agent", agent_id=agent_id, content=result.summary)

        text = (
            f"Agent: {agent_id}\n"
            f"Status: {'Success' if result.success else 'Failed'}\n"
            f"Summary: {result.summary}\n"
        )
        if result.insights:
            text += f"\nInsights ({len(result.insights)}):\n"
            for i, ins in enumerate(result.insights, 1):
                text += f"\n{i}. [{ins.type}] {ins.title}\n   {_indent(ins.detail)}\n"
        return ToolResult(text=text, data=result.to_dict())

    registry.register(ToolDefinition(
        name="run_agent",
        title="Run Agent",
        description=(
            "Run one agent: competitor-monitor (channels + competitor keywords), "
            "sentiment-analyst (comment sentiment and feature requests for video_ids), "
            "trend-spotter (keyword trends), lead-qualifier (buying signals). "
            "params may hold channel_ids, keywords and video_ids; when omitted the "
            "saved user profile is used."
        ),
        execute_fn=run_agent_execute,
    ))

    async def run_all_agents_execute() -> ToolResult:
        results = await orchestrator.run_all_agents()
        total_insights = sum(len(r.insights) for r in results)
        await store.add_conversation(
            role="agent", agent_id="orchestrator",
            content=f"Ran all agents: {total_insights} insights",
        )

        text = f"Ran {len(results)} agent(s). Total insights: {total_insights}\n"
        for r in results:
            text += f"\n--- {r.agent_id} ---\n{r.summary}\n"
            for i, ins in enumerate(r.insights, 1):
                text += f"  {i}. [{ins.type}] {ins.title}\n"
        return ToolResult(
            text=text,
            data={"total_insights": total_insights, "results": [r.to_dict() for r in results]},
        )

    registry.register(ToolDefinition(
        name="run_all_agents",
        title="Run All Agents",
        description=(
            "Run all agents based on your configured profile (what the heartbeat "
            "calls). Competitor Monitor runs with tracked channels or competitors, "
            "Trend Spotter with keywords, Lead Qualifier with keywords or competitors."
        ),
        execute_fn=run_all_agents_execute,
    ))

    async def get_insights_execute(agent_id: Optional[str] = None, type: Optional[str] = None,
                                   limit: int = 20) -> ToolResult:
        insights = await store.query_insights(agent_id=agent_id, insight_type=type, limit=limit)
        text = f"Insights ({len(insights)}):\n"
        for i, ins in enumerate(insights, 1):
            text += (
                f"\n{i}. [{ins.type}] {ins.title} (by {ins.agent_id}, {_day(ins.created_at)})\n"
                f"   {_indent(ins.detail)}\n"
            )
        return ToolResult(text=text, data={"insights": [asdict(i) for i in insights]})

    registry.register(ToolDefinition(
        name="get_insights",
        title="Get Insights",
        description=(
            "Retrieve stored insights from agent runs, optionally filtered by agent "
            "or type (buying_signal, competitor_move, sentiment, trend). Returns the "
            "most recent `limit` matches in the order they were recorded."
        ),
        execute_fn=get_insights_execute,
        read_only=True,
    ))

    async def get_memory_execute() -> ToolResult:
        state = await store.load()
        agents = orchestrator.list_agents()
        user = state.user

        text = "=== MEMORY STATE ===\n\n"
        text += "USER PROFILE:\n"
        text += f"  Industry: {user.industry or '(not set)'}\n"
        text += f"  Competitors: {_or_none(user.competitors)}\n"
        text += f"  Keywords: {_or_none(user.keywords)}\n"
        text += f"  Tracked Channels: {_or_none(user.tracked_channels)}\n"

        text += f"\nMONITORS ({len(state.monitors)}):\n"
        for m in state.monitors:
            text += f"  - [{m.type}] {m.value} (id: {m.id}, last checked: {m.last_checked_at or 'never'})\n"

        text += f"\nINSIGHTS ({len(state.insights)} stored):\n"
        for ins in state.insights[-INSIGHTS_SHOWN_IN_MEMORY:]:
            text += f"  - [{ins.type}] {ins.title} ({_day(ins.created_at)})\n"

        text += f"\nAGENTS ({len(agents)}):\n"
        for a in agents:
            text += f"  - {a['name']} ({a['id']}): {a['role'][:80]}\n"

        text += f"\nHEARTBEAT: {'Running' if heartbeat.is_running else 'Stopped'}\n"
        text += f"CONVERSATIONS: {len(state.conversations)} entries\n"
        return ToolResult(text=text, data=state.to_dict())

    registry.register(ToolDefinition(
        name="get_memory",
        title="Get Memory",
        description=(
            "View the full memory state: user profile, monitors, recent insights, "
            "agents and heartbeat status."
        ),
        execute_fn=get_memory_execute,
        read_only=True,
    ))

    # --- Heartbeat ---

    async def heartbeat_execute(action: str, interval_minutes: Optional[int] = None) -> ToolResult:
        if action == "start":
            result = heartbeat.start(interval_minutes or default_interval_minutes)
            if result["started"]:
                text = f"Heartbeat started. Running all agents every {result['interval_minutes']} minutes."
            else:
                text = f"Heartbeat is already running (every {result['interval_minutes']} minutes)."
            return ToolResult(text=text, data=result)

        if action == "stop":
            stopped = heartbeat.stop()
            text = "Heartbeat stopped." if stopped else "Heartbeat was not running."
            return ToolResult(text=text, data={"stopped": stopped})

        if action == "status":
            status = heartbeat.status()
            if status.running:
                text = f"Heartbeat is running (every {status.interval_minutes} minutes)."
            else:
                text = "Heartbeat is not running."
            return ToolResult(text=text, data=asdict(status))

        return ToolResult(text=f"Error: Unknown heartbeat action: {action}", is_error=True)

    registry.register(ToolDefinition(
        name="heartbeat",
        title="Heartbeat Control",
        description=(
            "Control the periodic heartbeat that runs all agents automatically: "
            "action is start, stop or status; interval_minutes (5-120) applies to start."
        ),
        execute_fn=heartbeat_execute,
    ))

    logger.info(f"Registered {len(registry.names())} tools")
    return registry
