"""
Memory models - the persisted aggregate and its parts.

MemoryState is the unit of persistence: the store always reads and
writes the whole thing. JSON keys are the dataclass field names.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

InsightType = Literal["buying_signal", "competitor_move", "sentiment", "trend"]
MonitorType = Literal["channel", "keyword"]
Role = Literal["user", "agent"]

INSIGHT_TYPES = ("buying_signal", "competitor_move", "sentiment", "trend")
MONITOR_TYPES = ("channel", "keyword")


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class UserProfile:
    """What the user cares about. Drives agent selection."""
    industry: Optional[str] = None
    competitors: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    tracked_channels: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    updated_at: str = field(default_factory=utc_now)

    @property
    def is_empty(self) -> bool:
        return not (self.competitors or self.keywords or self.tracked_channels)

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            industry=data.get("industry"),
            competitors=list(data.get("competitors", [])),
            keywords=list(data.get("keywords", [])),
            tracked_channels=list(data.get("tracked_channels", [])),
            notes=list(data.get("notes", [])),
            updated_at=data.get("updated_at") or utc_now(),
        )


@dataclass
class MonitorTarget:
    """A channel or keyword registered for periodic attention."""
    id: str
    type: MonitorType
    value: str
    created_at: str
    last_checked_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "MonitorTarget":
        return cls(
            id=data["id"],
            type=data["type"],
            value=data["value"],
            created_at=data["created_at"],
            last_checked_at=data.get("last_checked_at"),
        )


@dataclass
class InsightSource:
    """Where an insight came from. Usually one field is set."""
    video_id: Optional[str] = None
    channel_id: Optional[str] = None
    query: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "InsightSource":
        data = data or {}
        return cls(
            video_id=data.get("video_id"),
            channel_id=data.get("channel_id"),
            query=data.get("query"),
        )


@dataclass
class InsightEntry:
    """One persisted finding, tagged with the agent that produced it."""
    id: str
    agent_id: str
    type: InsightType
    title: str
    detail: str
    source: InsightSource
    created_at: str

    @classmethod
    def from_dict(cls, data: dict) -> "InsightEntry":
        return cls(
            id=data["id"],
            agent_id=data["agent_id"],
            type=data["type"],
            title=data["title"],
            detail=data.get("detail", ""),
            source=InsightSource.from_dict(data.get("source")),
            created_at=data["created_at"],
        )


@dataclass
class ConversationEntry:
    """One line of user/agent activity."""
    role: Role
    content: str
    timestamp: str
    agent_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ConversationEntry":
        return cls(
            role=data["role"],
            content=data.get("content", ""),
            timestamp=data["timestamp"],
            agent_id=data.get("agent_id"),
        )


@dataclass
class MemoryState:
    """The aggregate root: profile, monitors, insight log, conversation log."""
    user: UserProfile = field(default_factory=UserProfile)
    monitors: list[MonitorTarget] = field(default_factory=list)
    insights: list[InsightEntry] = field(default_factory=list)
    conversations: list[ConversationEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryState":
        return cls(
            user=UserProfile.from_dict(data.get("user") or {}),
            monitors=[MonitorTarget.from_dict(m) for m in data.get("monitors", [])],
            insights=[InsightEntry.from_dict(i) for i in data.get("insights", [])],
            conversations=[ConversationEntry.from_dict(c) for c in data.get("conversations", [])],
        )
