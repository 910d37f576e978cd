"""
Agent Orchestrator - picks agents, runs them, stores what they find.

Agents are looked up by id in AGENTS. Every insight an agent returns is
persisted through the MemoryStore tagged with the dispatching agent id.
run_all_agents() decides which agents to run from the stored profile.
"""

import logging
from typing import Optional

from agents import competitor_monitor, lead_qualifier, sentiment_analyst, trend_spotter
from agents.types import AgentResult
from core.memory.store import MemoryStore

logger = logging.getLogger(__name__)

AGENTS = {
    module.CONFIG.identity.id: module
    for module in (competitor_monitor, sentiment_analyst, trend_spotter, lead_qualifier)
}

ORCHESTRATOR_ID = "orchestrator"


class AgentOrchestrator:
    """Runs agents against one YouTube client and one memory store."""

    def __init__(self, youtube, store: MemoryStore):
        self.youtube = youtube
        self.store = store

    def list_agents(self) -> list[dict]:
        """Static metadata for every agent."""
        return [module.CONFIG.describe() for module in AGENTS.values()]

    async def run_agent(self, agent_id: str, params: Optional[dict] = None) -> AgentResult:
        """Run one agent and persist its insights. Unknown ids fail without side effects."""
        agent = AGENTS.get(agent_id)
        if agent is None:
            logger.warning(f"Unknown agent requested: {agent_id}")
            return AgentResult(
                agent_id=agent_id,
                success=False,
                summary=f"Unknown agent: {agent_id}",
            )

        logger.info(f"Running agent {agent_id}")
        result = await agent.run(self.youtube, params or {})

        for insight in result.insights:
            await self.store.add_insight(
                agent_id=agent_id,
                insight_type=insight.type,
                title=insight.title,
                detail=insight.detail,
                source=insight.source,
            )

        logger.info(f"Agent {agent_id} done: {len(result.insights)} insight(s)")
        return result

    async def profile_params(self) -> dict:
        """Agent params derived from the stored profile."""
        state = await self.store.load()
        user = state.user
        return {
            "channel_ids": list(user.tracked_channels),
            "keywords": [*user.keywords, *user.competitors],
            "video_ids": [],
        }

    async def run_all_agents(self) -> list[AgentResult]:
        """
        Run every agent the profile has inputs for.

        Order: Competitor Monitor (channels or competitors), Trend Spotter
        (keywords), Lead Qualifier (keywords or competitors). Sentiment
        Analyst needs video ids, which the profile never holds.
        """
        state = await self.store.load()
        user = state.user

        if user.is_empty:
            return [AgentResult(
                agent_id=ORCHESTRATOR_ID,
                success=False,
                summary=(
                    "No user profile configured. Use configure_user to set "
                    "competitors, keywords, or tracked channels."
                ),
            )]

        has_channels = bool(user.tracked_channels)
        has_keywords = bool(user.keywords)
        has_competitors = bool(user.competitors)
        results = []

        if has_channels or has_competitors:
            results.append(await self.run_agent(competitor_monitor.CONFIG.identity.id, {
                "channel_ids": list(user.tracked_channels),
                "keywords": [f"{c} review" for c in user.competitors],
            }))

        if has_keywords:
            results.append(await self.run_agent(trend_spotter.CONFIG.identity.id, {
                "keywords": list(user.keywords),
            }))

        if has_keywords or has_competitors:
            results.append(await self.run_agent(lead_qualifier.CONFIG.identity.id, {
                "keywords": [*user.keywords, *user.competitors],
            }))

        return results
