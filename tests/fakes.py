from __future__ import annotations

from datetime import datetime, timedelta, timezone

from tools.youtube_tool import (
    ChannelVideosResult,
    Comment,
    CommentsResult,
    Video,
    VideoSearchResult,
)


def iso_days_ago(days: float) -> str:
    stamp = datetime.now(timezone.utc) - timedelta(days=days)
    return stamp.strftime("%Y-%m-%dT%H:%M:%SZ")


def make_video(video_id: str, title: str, channel_title: str = "Some Channel", days_ago: float = 1) -> Video:
    return Video(
        video_id=video_id,
        title=title,
        description=f"About {title}",
        channel_id=f"UC_{channel_title}",
        channel_title=channel_title,
        published_at=iso_days_ago(days_ago),
    )


def make_comment(text: str, likes: int = 0, author: str = "viewer") -> Comment:
    return Comment(
        comment_id=f"c_{abs(hash(text))}",
        author_name=author,
        text=text,
        like_count=likes,
        published_at=iso_days_ago(1),
    )


class FakeYouTube:
    """In-memory stand-in for YouTubeTool. Table values may be exceptions to raise."""

    def __init__(self) -> None:
        self.searches: dict = {}
        self.comments: dict = {}
        self.channels: dict = {}
        self.calls: list[tuple] = []

    @staticmethod
    def _answer(table: dict, key: str, default):
        value = table.get(key, default)
        if isinstance(value, Exception):
            raise value
        return value

    async def search_videos(self, query: str, max_results: int = 10, page_token=None) -> VideoSearchResult:
        self.calls.append(("search_videos", query, max_results))
        return self._answer(self.searches, query, VideoSearchResult())

    async def get_video_comments(self, video_id: str, max_results: int = 50, page_token=None) -> CommentsResult:
        self.calls.append(("get_video_comments", video_id, max_results))
        return self._answer(self.comments, video_id, CommentsResult())

    async def get_channel_videos(self, channel_id: str, max_results: int = 10, page_token=None) -> ChannelVideosResult:
        self.calls.append(("get_channel_videos", channel_id, max_results))
        return self._answer(self.channels, channel_id, ChannelVideosResult(channel_title=channel_id))

    async def search_channels(self, query: str, max_results: int = 5) -> list:
        self.calls.append(("search_channels", query, max_results))
        return self._answer(self.searches, f"channel:{query}", [])

    async def close(self) -> None:
        pass


def search_result(*videos: Video, total: int | None = None) -> VideoSearchResult:
    return VideoSearchResult(videos=list(videos), total_results=len(videos) if total is None else total)


def comments_result(*comments: Comment) -> CommentsResult:
    return CommentsResult(comments=list(comments), total_results=len(comments))
