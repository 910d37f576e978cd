from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from core.memory import MemoryStore, MemoryStoreError
from core.memory.models import InsightEntry, InsightSource
from core.memory.store import MAX_CONVERSATIONS, MAX_INSIGHTS


def _store(tmp_path: Path) -> MemoryStore:
    return MemoryStore(tmp_path / "memory.json")


def test_missing_file_loads_defaults(tmp_path: Path) -> None:
    state = asyncio.run(_store(tmp_path).load())
    assert state.user.industry is None
    assert state.user.competitors == []
    assert state.user.updated_at
    assert state.monitors == []
    assert state.insights == []
    assert state.conversations == []


def test_corrupt_file_raises_and_is_left_alone(tmp_path: Path) -> None:
    path = tmp_path / "memory.json"
    path.write_text("{not json", encoding="utf-8")
    store = MemoryStore(path)

    with pytest.raises(MemoryStoreError):
        asyncio.run(store.load())
    with pytest.raises(MemoryStoreError):
        asyncio.run(store.add_insight("trend-spotter", "trend", "t", "d"))

    assert path.read_text(encoding="utf-8") == "{not json"


def test_non_object_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "memory.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(MemoryStoreError):
        asyncio.run(MemoryStore(path).load())


def test_save_creates_parent_directories(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "memory.json"
    store = MemoryStore(path)

    async def scenario():
        state = await store.load()
        state.user.industry = "CRM SaaS"
        await store.save(state)

    asyncio.run(scenario())
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["user"]["industry"] == "CRM SaaS"
    assert list(path.parent.glob("*.tmp")) == []


def test_update_profile_merges_supplied_fields_only(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        await store.update_profile(industry="CRM SaaS", competitors=["Acme"], keywords=["x", "y"])
        state = await store.load()
        state.user.updated_at = "2000-01-01T00:00:00+00:00"
        await store.save(state)
        return await store.update_profile(keywords=["a"])

    user = asyncio.run(scenario())
    assert user.industry == "CRM SaaS"
    assert user.competitors == ["Acme"]
    assert user.keywords == ["a"]
    assert user.updated_at != "2000-01-01T00:00:00+00:00"


def test_add_monitor_is_idempotent(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        first = await store.add_monitor("keyword", "crm")
        second = await store.add_monitor("keyword", "crm")
        other = await store.add_monitor("channel", "crm")
        return first, second, other, await store.load()

    first, second, other, state = asyncio.run(scenario())
    assert first.id == second.id
    assert first.id.startswith("mon_")
    assert other.id != first.id
    assert len(state.monitors) == 2
    assert state.monitors[0].last_checked_at is None


def test_add_monitor_rejects_unknown_type(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        asyncio.run(_store(tmp_path).add_monitor("playlist", "x"))


def test_remove_monitor(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        monitor = await store.add_monitor("channel", "UC123")
        removed = await store.remove_monitor(monitor.id)
        removed_again = await store.remove_monitor(monitor.id)
        return removed, removed_again, await store.load()

    removed, removed_again, state = asyncio.run(scenario())
    assert removed is True
    assert removed_again is False
    assert state.monitors == []


def test_touch_monitors_stamps_every_monitor(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        await store.add_monitor("channel", "UC123")
        await store.add_monitor("keyword", "crm")
        count = await store.touch_monitors("2024-05-01T00:00:00+00:00")
        return count, await store.load()

    count, state = asyncio.run(scenario())
    assert count == 2
    assert {m.last_checked_at for m in state.monitors} == {"2024-05-01T00:00:00+00:00"}


def test_insights_are_capped_to_most_recent(tmp_path: Path) -> None:
    store = _store(tmp_path)

    async def scenario():
        state = await store.load()
        state.insights = [
            InsightEntry(
                id=f"ins_{i}", agent_id="trend-spotter", type="trend", title=f"insight {i}",
                detail="detail", source=InsightSource(), created_at="2024-01-01T00:00:00+00:00",
            )
            for i in range(MAX_INSIGHTS)
        ]
        await store.save(state)
        await store.add_insight("trend-spotter", "trend", f"insight {MAX_INSIGHTS}", "detail")
        return await store.load()

    state = asyncio.run(scenario())
    assert len(state.insights) == MAX_INSIGHTS
    assert state.insights[0].title == "insight 1"
    assert state.insights[-1].title == f"insight {MAX_INSIGHTS}"


def test_conversations_are_capped_to_most_recent(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        for i in range(MAX_CONVERSATIONS + 1):
            await store.add_conversation("user", f"message {i}")
        return await store.load()

    state = asyncio.run(scenario())
    assert len(state.conversations) == MAX_CONVERSATIONS
    assert state.conversations[0].content == "message 1"


def test_query_insights_filters_then_takes_suffix(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        await store.add_insight("trend-spotter", "trend", "t1", "d")
        await store.add_insight("lead-qualifier", "buying_signal", "b1", "d")
        await store.add_insight("trend-spotter", "trend", "t2", "d")
        await store.add_insight("trend-spotter", "trend", "t3", "d",
                                source=InsightSource(query="crm"))
        by_agent = await store.query_insights(agent_id="trend-spotter", limit=2)
        by_type = await store.query_insights(insight_type="buying_signal")
        everything = await store.query_insights(limit=10)
        none = await store.query_insights(limit=0)
        return by_agent, by_type, everything, none

    by_agent, by_type, everything, none = asyncio.run(scenario())
    assert [i.title for i in by_agent] == ["t2", "t3"]
    assert by_agent[-1].source.query == "crm"
    assert [i.title for i in by_type] == ["b1"]
    assert [i.title for i in everything] == ["t1", "b1", "t2", "t3"]
    assert none == []


def test_concurrent_mutations_do_not_lose_writes(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        await asyncio.gather(*(
            store.add_insight("sentiment-analyst", "sentiment", f"s{i}", "d") for i in range(20)
        ), store.add_monitor("keyword", "crm"), store.add_conversation("user", "hi"))
        return await store.load()

    state = asyncio.run(scenario())
    assert len(state.insights) == 20
    assert len({i.id for i in state.insights}) == 20
    assert len(state.monitors) == 1
    assert len(state.conversations) == 1


def test_state_round_trips_through_json(tmp_path: Path) -> None:
    async def scenario():
        store = _store(tmp_path)
        await store.update_profile(industry="CRM SaaS", tracked_channels=["UC1"])
        await store.add_insight("competitor-monitor", "competitor_move", "t", "d",
                                source=InsightSource(channel_id="UC1"))
        await store.add_conversation("agent", "ran", agent_id="competitor-monitor")
        return await MemoryStore(tmp_path / "memory.json").load()

    state = asyncio.run(scenario())
    data = json.loads((tmp_path / "memory.json").read_text(encoding="utf-8"))
    assert set(data) == {"user", "monitors", "insights", "conversations"}
    assert data["insights"][0]["source"]["channel_id"] == "UC1"
    assert state.user.tracked_channels == ["UC1"]
    assert state.conversations[0].agent_id == "competitor-monitor"
