"""
Lead Qualifier - finds purchase-intent language in comments.

For each keyword, searches review/comparison content and scans the
comments of the top-ranked video. Explicit video ids are scanned directly.
A comment is flagged by the first buying-signal phrase it contains.
"""

import logging

from agents.signals import get_vocabulary
from agents.types import (
    AgentConfig,
    AgentIdentity,
    AgentResult,
    AgentSoul,
    InsightDraft,
    param_list,
    quote,
)
from core.memory.models import InsightSource
from tools.youtube_tool import Comment, YouTubeError

logger = logging.getLogger(__name__)

SEARCH_RESULTS = 5
TOP_VIDEO_COMMENTS = 30
DIRECT_VIDEO_COMMENTS = 50
QUOTE_LENGTH = 100
MAX_EXAMPLES = 5

CONFIG = AgentConfig(
    identity=AgentIdentity(
        id="lead-qualifier",
        name="Lead Qualifier",
        role="Identifies buying signals and high-intent discussions in YouTube content and comments.",
    ),
    soul=AgentSoul(
        thinking_style="Action-oriented and opportunity-focused. Looks for language that signals purchase intent.",
        boundaries=(
            "Only flags explicit buying language",
            "Does not score or rank leads without data",
        ),
        priorities=(
            "Direct comparison/evaluation comments",
            "Migration or switching discussions",
            "Budget and pricing mentions",
        ),
    ),
    skills=("youtube_search_videos", "youtube_get_comments"),
)


def intent_query(keyword: str) -> str:
    return f"{keyword} review OR comparison OR alternative OR best"


def flag_comments(comments: list[Comment]) -> list[tuple[str, Comment]]:
    """(matched phrase, comment) for every comment carrying a buying signal."""
    vocabulary = get_vocabulary()
    flagged = []
    for comment in comments:
        phrase = vocabulary.buying_signal(comment.text)
        if phrase is not None:
            flagged.append((phrase, comment))
    return flagged


async def run(youtube, params: dict) -> AgentResult:
    keywords = param_list(params, "keywords")
    video_ids = param_list(params, "video_ids", "videoIds")
    insights: list[InsightDraft] = []

    for keyword in keywords:
        try:
            result = await youtube.search_videos(intent_query(keyword), SEARCH_RESULTS)
        except YouTubeError as e:
            logger.warning(f"Skipping lead search '{keyword}': {e}")
            continue

        if not result.videos:
            continue

        top_video = result.videos[0]
        try:
            comments = await youtube.get_video_comments(top_video.video_id, TOP_VIDEO_COMMENTS)
        except YouTubeError as e:
            logger.warning(f"Comments unavailable for {top_video.video_id}: {e}")
            continue

        flagged = flag_comments(comments.comments)
        if flagged:
            insights.append(InsightDraft(
                type="buying_signal",
                title=f'{len(flagged)} buying signals in "{top_video.title}"',
                detail="\n".join(
                    f'- [{phrase}] "{quote(c.text, QUOTE_LENGTH)}" by {c.author_name} ({c.like_count} likes)'
                    for phrase, c in flagged[:MAX_EXAMPLES]
                ),
                source=InsightSource(video_id=top_video.video_id, query=keyword),
            ))

    for video_id in video_ids:
        try:
            comments = await youtube.get_video_comments(video_id, DIRECT_VIDEO_COMMENTS)
        except YouTubeError as e:
            logger.warning(f"Skipping comments for {video_id}: {e}")
            continue

        flagged = flag_comments(comments.comments)
        if flagged:
            insights.append(InsightDraft(
                type="buying_signal",
                title=f"{len(flagged)} buying signals in video comments",
                detail="\n".join(
                    f'- [{phrase}] "{quote(c.text, QUOTE_LENGTH)}" by {c.author_name}'
                    for phrase, c in flagged[:MAX_EXAMPLES]
                ),
                source=InsightSource(video_id=video_id),
            ))

    return AgentResult(
        agent_id=CONFIG.identity.id,
        success=True,
        summary=(
            f"Qualified leads across {len(keywords)} keyword(s) and {len(video_ids)} video(s). "
            f"Found {len(insights)} buying signal clusters."
        ),
        insights=insights,
    )
