"""
Sentiment Analyst - sorts comments into complaints, requests and praise.

Classification is literal keyword matching (see signals.yaml), checked
request > negative > positive. Feature requests are stored as
buying_signal insights, not sentiment.
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
from tools.youtube_tool import YouTubeError

logger = logging.getLogger(__name__)

COMMENTS_PER_VIDEO = 50
QUOTE_LENGTH = 120

CONFIG = AgentConfig(
    identity=AgentIdentity(
        id="sentiment-analyst",
        name="Sentiment Analyst",
        role="Analyzes YouTube comments to extract sentiment patterns, complaints, praise, and feature requests.",
    ),
    soul=AgentSoul(
        thinking_style="Skeptical and evidence-based. Classifies by observable language, not assumptions.",
        boundaries=(
            "Reports direct quotes",
            "Does not infer intent beyond stated words",
        ),
        priorities=(
            "Pain points and complaints",
            "Feature requests",
            "Competitor comparisons in comments",
        ),
    ),
    skills=("youtube_get_comments",),
)


def classify_comment(text: str) -> str:
    """positive / negative / request / neutral."""
    return get_vocabulary().classify_sentiment(text)


async def run(youtube, params: dict) -> AgentResult:
    video_ids = param_list(params, "video_ids", "videoIds")
    insights: list[InsightDraft] = []

    for video_id in video_ids:
        try:
            result = await youtube.get_video_comments(video_id, COMMENTS_PER_VIDEO)
        except YouTubeError as e:
            logger.warning(f"Skipping comments for {video_id}: {e}")
            continue

        buckets = {"negative": [], "request": [], "positive": []}
        for comment in result.comments:
            sentiment = classify_comment(comment.text)
            if sentiment in buckets:
                buckets[sentiment].append(comment)

        source = InsightSource(video_id=video_id)
        negatives = buckets["negative"]
        requests = buckets["request"]
        positives = buckets["positive"]

        if negatives:
            insights.append(InsightDraft(
                type="sentiment",
                title=f"{len(negatives)} negative comments on video",
                detail="\n".join(
                    f'- "{quote(c.text, QUOTE_LENGTH)}" ({c.like_count} likes)' for c in negatives[:5]
                ),
                source=source,
            ))

        if requests:
            insights.append(InsightDraft(
                type="buying_signal",
                title=f"{len(requests)} feature requests / wishes",
                detail="\n".join(
                    f'- "{quote(c.text, QUOTE_LENGTH)}" ({c.like_count} likes)' for c in requests[:5]
                ),
                source=source,
            ))

        if positives:
            insights.append(InsightDraft(
                type="sentiment",
                title=f"{len(positives)} positive comments",
                detail="\n".join(
                    f'- "{quote(c.text, QUOTE_LENGTH)}"' for c in positives[:3]
                ),
                source=source,
            ))

    return AgentResult(
        agent_id=CONFIG.identity.id,
        success=True,
        summary=(
            f"Analyzed comments on {len(video_ids)} video(s). "
            f"Found {len(insights)} sentiment insights."
        ),
        insights=insights,
    )
