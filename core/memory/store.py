"""
Memory Store - JSON file persistence for the insight system.

One JSON document holds the whole MemoryState:
- Profile: what the user wants watched (merge-updated)
- Monitors: channels/keywords under watch (idempotent by type+value)
- Insights: agent findings (last 500 kept)
- Conversations: activity log (last 200 kept)

Every mutation is load -> change -> save of the full document. Mutations
are serialized through one asyncio.Lock so interleaved callers (a tool
call racing a heartbeat tick) can't lose each other's writes. File I/O
runs in a worker thread to keep the event loop free.
"""

import asyncio
import json
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Callable, Optional, TypeVar

from core.memory.models import (
    MONITOR_TYPES,
    ConversationEntry,
    InsightEntry,
    InsightSource,
    MemoryState,
    MonitorTarget,
    UserProfile,
    utc_now,
)

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 500
MAX_CONVERSATIONS = 200
DEFAULT_INSIGHT_LIMIT = 50

T = TypeVar("T")


class MemoryStoreError(Exception):
    """State file can't be read, parsed or written."""
    pass


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class MemoryStore:
    """Read-modify-write store over a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    # --- Raw persistence ---

    async def load(self) -> MemoryState:
        """Load the full state. Missing file -> fresh defaults. Corrupt file -> error."""
        return await asyncio.to_thread(self._read)

    async def save(self, state: MemoryState):
        """Replace the persisted state with `state`."""
        async with self._write_lock:
            await asyncio.to_thread(self._write, state)

    def _read(self) -> MemoryState:
        if not self.path.exists():
            return MemoryState()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise MemoryStoreError(f"Cannot read memory file {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MemoryStoreError(f"Memory file {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MemoryStoreError(f"Memory file {self.path} does not hold a JSON object")
        try:
            return MemoryState.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise MemoryStoreError(f"Memory file {self.path} has an unexpected shape: {e}") from e

    def _write(self, state: MemoryState):
        payload = json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=f"{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(temp_path, self.path)
            finally:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
        except OSError as e:
            raise MemoryStoreError(f"Cannot write memory file {self.path}: {e}") from e

    async def _mutate(self, change: Callable[[MemoryState], T]) -> T:
        """Load, apply `change`, save. Returns whatever `change` returns."""
        async with self._write_lock:
            state = await asyncio.to_thread(self._read)
            result = change(state)
            await asyncio.to_thread(self._write, state)
            return result

    # --- Profile ---

    async def update_profile(self, industry: Optional[str] = None,
                             competitors: Optional[list[str]] = None,
                             keywords: Optional[list[str]] = None,
                             tracked_channels: Optional[list[str]] = None,
                             notes: Optional[list[str]] = None) -> UserProfile:
        """
        Merge-update the profile. Supplied fields replace the stored ones
        wholesale (lists are not merged); None means "leave as is".
        """
        def change(state: MemoryState) -> UserProfile:
            user = state.user
            if industry is not None:
                user.industry = industry
            if competitors is not None:
                user.competitors = list(competitors)
            if keywords is not None:
                user.keywords = list(keywords)
            if tracked_channels is not None:
                user.tracked_channels = list(tracked_channels)
            if notes is not None:
                user.notes = list(notes)
            user.updated_at = utc_now()
            return user

        profile = await self._mutate(change)
        logger.info("Profile updated")
        return profile

    # --- Monitors ---

    async def add_monitor(self, monitor_type: str, value: str) -> MonitorTarget:
        """Add a monitor target. Returns the existing one if (type, value) is already watched."""
        if monitor_type not in MONITOR_TYPES:
            raise ValueError(f"Unknown monitor type: {monitor_type}")

        def change(state: MemoryState) -> MonitorTarget:
            for monitor in state.monitors:
                if monitor.type == monitor_type and monitor.value == value:
                    return monitor
            monitor = MonitorTarget(
                id=_new_id("mon"),
                type=monitor_type,
                value=value,
                created_at=utc_now(),
            )
            state.monitors.append(monitor)
            logger.info(f"Monitor added: [{monitor_type}] {value}")
            return monitor

        return await self._mutate(change)

    async def remove_monitor(self, monitor_id: str) -> bool:
        """Remove a monitor by id. Returns True if something was removed."""
        def change(state: MemoryState) -> bool:
            before = len(state.monitors)
            state.monitors = [m for m in state.monitors if m.id != monitor_id]
            return len(state.monitors) < before

        return await self._mutate(change)

    async def touch_monitors(self, checked_at: Optional[str] = None) -> int:
        """Stamp every monitor's last_checked_at on the latest state. Returns the count."""
        stamp = checked_at or utc_now()

        def change(state: MemoryState) -> int:
            for monitor in state.monitors:
                monitor.last_checked_at = stamp
            return len(state.monitors)

        return await self._mutate(change)

    # --- Insights ---

    async def add_insight(self, agent_id: str, insight_type: str, title: str,
                          detail: str, source: Optional[InsightSource] = None) -> InsightEntry:
        """Append an insight, evicting the oldest beyond MAX_INSIGHTS."""
        entry = InsightEntry(
            id=_new_id("ins"),
            agent_id=agent_id,
            type=insight_type,
            title=title,
            detail=detail,
            source=source or InsightSource(),
            created_at=utc_now(),
        )

        def change(state: MemoryState) -> InsightEntry:
            state.insights.append(entry)
            if len(state.insights) > MAX_INSIGHTS:
                state.insights = state.insights[-MAX_INSIGHTS:]
            return entry

        return await self._mutate(change)

    async def query_insights(self, agent_id: Optional[str] = None,
                             insight_type: Optional[str] = None,
                             limit: int = DEFAULT_INSIGHT_LIMIT) -> list[InsightEntry]:
        """
        Filter by agent and/or type, then return the last `limit` matches
        in append order (a suffix slice, not a sort).
        """
        if limit <= 0:
            return []
        state = await self.load()
        results = state.insights
        if agent_id:
            results = [i for i in results if i.agent_id == agent_id]
        if insight_type:
            results = [i for i in results if i.type == insight_type]
        return results[-limit:]

    # --- Conversations ---

    async def add_conversation(self, role: str, content: str,
                               agent_id: Optional[str] = None) -> ConversationEntry:
        """Append a conversation entry, evicting the oldest beyond MAX_CONVERSATIONS."""
        entry = ConversationEntry(
            role=role,
            content=content,
            timestamp=utc_now(),
            agent_id=agent_id,
        )

        def change(state: MemoryState) -> ConversationEntry:
            state.conversations.append(entry)
            if len(state.conversations) > MAX_CONVERSATIONS:
                state.conversations = state.conversations[-MAX_CONVERSATIONS:]
            return entry

        return await self._mutate(change)
