"""
Shared agent shapes.

An agent is a module exposing CONFIG (identity, soul, skills) and
`async run(youtube, params) -> AgentResult`. The orchestrator keeps them
in a lookup table; there is no base class.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable

from core.memory.models import InsightSource, InsightType
from tools.youtube_tool import Video


@dataclass(frozen=True)
class AgentIdentity:
    id: str
    name: str
    role: str


@dataclass(frozen=True)
class AgentSoul:
    """Descriptive metadata only. Nothing reads this to make decisions."""
    thinking_style: str
    boundaries: tuple[str, ...]
    priorities: tuple[str, ...]


@dataclass(frozen=True)
class AgentConfig:
    identity: AgentIdentity
    soul: AgentSoul
    skills: tuple[str, ...]  # tool names the agent may call

    def describe(self) -> dict:
        return {
            "id": self.identity.id,
            "name": self.identity.name,
            "role": self.identity.role,
            "skills": list(self.skills),
            "soul": {
                "thinking_style": self.soul.thinking_style,
                "boundaries": list(self.soul.boundaries),
                "priorities": list(self.soul.priorities),
            },
        }


@dataclass
class InsightDraft:
    """An insight as an agent returns it: no id, timestamp or agent id yet."""
    type: InsightType
    title: str
    detail: str
    source: InsightSource = field(default_factory=InsightSource)


@dataclass
class AgentResult:
    agent_id: str
    success: bool
    summary: str
    insights: list[InsightDraft] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def param_list(params: dict, key: str, *aliases: str) -> list[str]:
    """Read a list parameter by name or alias. Missing or null -> []."""
    for name in (key, *aliases):
        value = params.get(name)
        if value is None:
            continue
        if isinstance(value, str):
            return [value]
        return [str(v) for v in value]
    return []


def published_within(videos: Iterable[Video], days: int) -> list[Video]:
    """Videos published strictly after now - `days`. Undated videos are excluded."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    recent = []
    for video in videos:
        published = video.published
        if published is None:
            continue
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        if published > cutoff:
            recent.append(video)
    return recent


def quote(text: str, limit: int) -> str:
    """Comment text cut to `limit` characters."""
    return text[:limit]
