"""
Competitor Monitor - watches competitor channels and competitor keywords.

Channels: anything uploaded in the last 7 days is a competitor move.
Keywords: any search hit for "<competitor> review" style queries is reported
with the top three titles.
"""

import logging

from agents.types import (
    AgentConfig,
    AgentIdentity,
    AgentResult,
    AgentSoul,
    InsightDraft,
    param_list,
    published_within,
)
from core.memory.models import InsightSource
from tools.youtube_tool import YouTubeError

logger = logging.getLogger(__name__)

RECENT_DAYS = 7
CHANNEL_VIDEOS = 5
SEARCH_RESULTS = 5

CONFIG = AgentConfig(
    identity=AgentIdentity(
        id="competitor-monitor",
        name="Competitor Monitor",
        role="Watches competitor YouTube channels and detects new content, messaging shifts, and product announcements.",
    ),
    soul=AgentSoul(
        thinking_style="Analytical and pattern-seeking. Compares current content against past observations to spot changes.",
        boundaries=(
            "Only reports factual observations, not speculation",
            "Focuses on content strategy, not vanity metrics",
        ),
        priorities=(
            "New product announcements",
            "Messaging or positioning changes",
            "Content frequency shifts",
        ),
    ),
    skills=("youtube_get_channel_videos", "youtube_search_videos"),
)


async def run(youtube, params: dict) -> AgentResult:
    channel_ids = param_list(params, "channel_ids", "channelIds")
    keywords = param_list(params, "keywords")
    insights: list[InsightDraft] = []

    for channel_id in channel_ids:
        try:
            result = await youtube.get_channel_videos(channel_id, CHANNEL_VIDEOS)
        except YouTubeError as e:
            logger.warning(f"Skipping channel {channel_id}: {e}")
            continue

        recent = published_within(result.videos, RECENT_DAYS)
        if recent:
            insights.append(InsightDraft(
                type="competitor_move",
                title=f"{result.channel_title}: {len(recent)} new video(s) this week",
                detail="\n".join(
                    f'- "{v.title}" ({v.published_at.split("T")[0]})' for v in recent
                ),
                source=InsightSource(channel_id=channel_id),
            ))

    for keyword in keywords:
        try:
            result = await youtube.search_videos(keyword, SEARCH_RESULTS)
        except YouTubeError as e:
            logger.warning(f"Skipping competitor search '{keyword}': {e}")
            continue

        if result.videos:
            insights.append(InsightDraft(
                type="competitor_move",
                title=f'"{keyword}": {result.total_results} videos found',
                detail="\n".join(
                    f'- "{v.title}" by {v.channel_title}' for v in result.videos[:3]
                ),
                source=InsightSource(query=keyword),
            ))

    return AgentResult(
        agent_id=CONFIG.identity.id,
        success=True,
        summary=(
            f"Monitored {len(channel_ids)} channels and {len(keywords)} keywords. "
            f"Found {len(insights)} insights."
        ),
        insights=insights,
    )
