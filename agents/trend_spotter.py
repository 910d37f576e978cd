"""
Trend Spotter - volume and recency per keyword.

Reports how many videos a keyword returns, how many of the top ten are
from the last two weeks, and which channels are publishing on it.
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

RECENT_DAYS = 14
SEARCH_RESULTS = 10
TOP_CHANNELS = 5

CONFIG = AgentConfig(
    identity=AgentIdentity(
        id="trend-spotter",
        name="Trend Spotter",
        role="Tracks keyword trends on YouTube to identify emerging topics, rising content, and market shifts.",
    ),
    soul=AgentSoul(
        thinking_style="Curious and forward-looking. Identifies patterns across multiple searches.",
        boundaries=(
            "Reports volume and recency, not causation",
            "Flags trends, does not predict outcomes",
        ),
        priorities=(
            "Emerging topics with rising video counts",
            "New entrants publishing on tracked keywords",
            "Shift in content format or angle",
        ),
    ),
    skills=("youtube_search_videos",),
)


async def run(youtube, params: dict) -> AgentResult:
    keywords = param_list(params, "keywords")
    insights: list[InsightDraft] = []

    for keyword in keywords:
        try:
            result = await youtube.search_videos(keyword, SEARCH_RESULTS)
        except YouTubeError as e:
            logger.warning(f"Skipping trend keyword '{keyword}': {e}")
            continue

        recent = published_within(result.videos, RECENT_DAYS)
        # first-seen order
        channels = list(dict.fromkeys(v.channel_title for v in result.videos))

        if recent:
            recent_line = "Recent: " + ", ".join(f'"{v.title}"' for v in recent[:3])
        else:
            recent_line = "No recent videos in the last 2 weeks"

        insights.append(InsightDraft(
            type="trend",
            title=f'"{keyword}": {result.total_results} total, {len(recent)} in last 2 weeks',
            detail="\n".join([
                f"Top channels: {', '.join(channels[:TOP_CHANNELS])}",
                recent_line,
            ]),
            source=InsightSource(query=keyword),
        ))

    return AgentResult(
        agent_id=CONFIG.identity.id,
        success=True,
        summary=(
            f"Scanned trends for {len(keywords)} keyword(s). "
            f"Found {len(insights)} trend insights."
        ),
        insights=insights,
    )
