"""
YouTube Data API v3 client.

Four read-only capabilities used by the tool surface and by the agents:
search videos, list comments, list a channel's uploads, search channels.

Requires YOUTUBE_API_KEY. Failures are raised as YouTubeError subclasses
so callers can tell quota/permission, bad request, not-found and
disabled-comments apart.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

API_BASE = "https://www.googleapis.com/youtube/v3"


# --- Errors ---

class YouTubeError(Exception):
    """Base class for every YouTube capability failure."""
    pass


class YouTubeConfigError(YouTubeError):
    """API key missing."""
    pass


class YouTubeQuotaError(YouTubeError):
    """HTTP 403: quota exhausted or access denied."""
    pass


class CommentsDisabledError(YouTubeError):
    """HTTP 403 with reason commentsDisabled."""
    pass


class YouTubeBadRequestError(YouTubeError):
    """HTTP 400."""
    pass


class YouTubeNotFoundError(YouTubeError):
    """HTTP 404, or a lookup that came back empty."""
    pass


class YouTubeAPIError(YouTubeError):
    """Any other non-2xx response."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class YouTubeNetworkError(YouTubeError):
    """Transport failure before a response arrived."""
    pass


# --- Result types ---

@dataclass
class Video:
    video_id: str
    title: str
    description: str
    channel_id: str
    channel_title: str
    published_at: str
    thumbnail_url: str = ""

    @property
    def url(self) -> str:
        return f"https://youtube.com/watch?v={self.video_id}"

    @property
    def published(self) -> Optional[datetime]:
        """published_at as an aware datetime, or None if unparseable."""
        return parse_date(self.published_at)


@dataclass
class Comment:
    comment_id: str
    author_name: str
    text: str
    like_count: int
    published_at: str
    reply_count: int = 0
    author_channel_id: Optional[str] = None


@dataclass
class ChannelInfo:
    channel_id: str
    title: str
    description: str

    @property
    def url(self) -> str:
        return f"https://youtube.com/channel/{self.channel_id}"


@dataclass
class VideoSearchResult:
    videos: list[Video] = field(default_factory=list)
    total_results: int = 0
    next_page_token: Optional[str] = None


@dataclass
class CommentsResult:
    comments: list[Comment] = field(default_factory=list)
    total_results: int = 0
    next_page_token: Optional[str] = None


@dataclass
class ChannelVideosResult:
    channel_title: str
    videos: list[Video] = field(default_factory=list)
    next_page_token: Optional[str] = None


def parse_date(date_str: str) -> Optional[datetime]:
    """Parse YouTube date format (ISO 8601, trailing Z)."""
    if not date_str:
        return None
    try:
        return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        return None


def _thumbnail(snippet: dict) -> str:
    return snippet.get("thumbnails", {}).get("medium", {}).get("url", "")


class YouTubeTool:
    """Async YouTube Data API client."""

    def __init__(self, api_key: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 30.0):
        self.api_key = api_key if api_key is not None else os.environ.get("YOUTUBE_API_KEY", "")
        self.client = client or httpx.AsyncClient(timeout=timeout)

        if not self.api_key:
            logger.warning("YOUTUBE_API_KEY not set - YouTube calls will fail")

    async def _request(self, endpoint: str, params: dict) -> dict:
        """GET an API endpoint and map failures onto the error taxonomy."""
        if not self.api_key:
            raise YouTubeConfigError(
                "YOUTUBE_API_KEY environment variable is not set. "
                "Get a free API key from Google Cloud Console: "
                "https://console.cloud.google.com/apis/credentials"
            )

        query = {"key": self.api_key, **params}
        try:
            response = await self.client.get(f"{API_BASE}/{endpoint}", params=query)
        except httpx.HTTPError as e:
            raise YouTubeNetworkError(f"Request to YouTube {endpoint} failed: {e}") from e

        if response.is_success:
            try:
                data = response.json()
            except ValueError as e:
                raise YouTubeAPIError(
                    response.status_code, f"Invalid JSON from YouTube {endpoint}: {e}"
                ) from e
            if not isinstance(data, dict):
                raise YouTubeAPIError(
                    response.status_code, f"Unexpected response shape from YouTube {endpoint}"
                )
            return data

        body = response.text
        status = response.status_code
        if status == 403:
            if "commentsDisabled" in self._error_reasons(response):
                raise CommentsDisabledError(f"Comments are disabled for this video: {body}")
            raise YouTubeQuotaError(
                "YouTube API quota exceeded or access denied. "
                "Check your API key and quota at "
                "https://console.cloud.google.com/apis/api/youtube.googleapis.com/quotas"
            )
        if status == 400:
            raise YouTubeBadRequestError(f"Invalid request: {body}")
        if status == 404:
            raise YouTubeNotFoundError(f"Not found: {body}")
        raise YouTubeAPIError(status, f"YouTube API error ({status}): {body}")

    @staticmethod
    def _error_reasons(response: httpx.Response) -> list[str]:
        try:
            errors = response.json().get("error", {}).get("errors", [])
        except ValueError:
            return []
        return [e.get("reason", "") for e in errors if isinstance(e, dict)]

    async def search_videos(self, query: str, max_results: int = 10,
                            page_token: Optional[str] = None) -> VideoSearchResult:
        """Search videos by relevance."""
        params = {
            "part": "snippet",
            "type": "video",
            "q": query,
            "maxResults": str(max_results),
            "order": "relevance",
        }
        if page_token:
            params["pageToken"] = page_token

        data = await self._request("search", params)

        videos = []
        for item in data.get("items", []):
            snippet = item.get("snippet", {})
            videos.append(Video(
                video_id=item.get("id", {}).get("videoId", ""),
                title=snippet.get("title", ""),
                description=snippet.get("description", ""),
                channel_id=snippet.get("channelId", ""),
                channel_title=snippet.get("channelTitle", ""),
                published_at=snippet.get("publishedAt", ""),
                thumbnail_url=_thumbnail(snippet),
            ))

        return VideoSearchResult(
            videos=videos,
            total_results=data.get("pageInfo", {}).get("totalResults", len(videos)),
            next_page_token=data.get("nextPageToken"),
        )

    async def get_video_comments(self, video_id: str, max_results: int = 50,
                                 page_token: Optional[str] = None) -> CommentsResult:
        """Top-level comment threads for a video, by relevance."""
        params = {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": str(max_results),
            "order": "relevance",
            "textFormat": "plainText",
        }
        if page_token:
            params["pageToken"] = page_token

        data = await self._request("commentThreads", params)

        comments = []
        for item in data.get("items", []):
            thread = item.get("snippet", {})
            top = thread.get("topLevelComment", {})
            snippet = top.get("snippet", {})
            comments.append(Comment(
                comment_id=top.get("id", ""),
                author_name=snippet.get("authorDisplayName", ""),
                author_channel_id=snippet.get("authorChannelId", {}).get("value"),
                text=snippet.get("textDisplay", ""),
                like_count=int(snippet.get("likeCount", 0)),
                published_at=snippet.get("publishedAt", ""),
                reply_count=int(thread.get("totalReplyCount", 0)),
            ))

        return CommentsResult(
            comments=comments,
            total_results=data.get("pageInfo", {}).get("totalResults", len(comments)),
            next_page_token=data.get("nextPageToken"),
        )

    async def get_channel_videos(self, channel_id: str, max_results: int = 10,
                                 page_token: Optional[str] = None) -> ChannelVideosResult:
        """Recent uploads of a channel: resolve the uploads playlist, then list it."""
        channel_data = await self._request("channels", {
            "part": "contentDetails,snippet",
            "id": channel_id,
        })

        items = channel_data.get("items") or []
        if not items:
            raise YouTubeNotFoundError(f"Channel not found: {channel_id}")

        uploads_playlist = items[0].get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads", "")
        channel_title = items[0].get("snippet", {}).get("title", channel_id)
        if not uploads_playlist:
            raise YouTubeNotFoundError(f"Channel {channel_id} has no uploads playlist")

        params = {
            "part": "snippet",
            "playlistId": uploads_playlist,
            "maxResults": str(max_results),
        }
        if page_token:
            params["pageToken"] = page_token

        data = await self._request("playlistItems", params)

        videos = []
        for item in data.get("items", []):
            snippet = item.get("snippet", {})
            videos.append(Video(
                video_id=snippet.get("resourceId", {}).get("videoId", ""),
                title=snippet.get("title", ""),
                description=snippet.get("description", ""),
                channel_id=snippet.get("channelId", channel_id),
                channel_title=snippet.get("channelTitle", channel_title),
                published_at=snippet.get("publishedAt", ""),
                thumbnail_url=_thumbnail(snippet),
            ))

        return ChannelVideosResult(
            channel_title=channel_title,
            videos=videos,
            next_page_token=data.get("nextPageToken"),
        )

    async def search_channels(self, query: str, max_results: int = 5) -> list[ChannelInfo]:
        """Find channels by name."""
        data = await self._request("search", {
            "part": "snippet",
            "type": "channel",
            "q": query,
            "maxResults": str(max_results),
        })

        return [
            ChannelInfo(
                channel_id=item.get("id", {}).get("channelId", ""),
                title=item.get("snippet", {}).get("title", ""),
                description=item.get("snippet", {}).get("description", ""),
            )
            for item in data.get("items", [])
        ]

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
