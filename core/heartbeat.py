"""
Heartbeat - periodically runs all agents.

Uses an in-memory APScheduler AsyncIOScheduler with a single interval job.
Nothing is persisted: a restart always comes up with the heartbeat off.

stop() removes the job but leaves the scheduler running, so a tick that
is already in flight finishes instead of being cancelled.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.memory.store import MemoryStore

logger = logging.getLogger(__name__)

JOB_ID = "heartbeat"
HEARTBEAT_AGENT_ID = "heartbeat"
DEFAULT_INTERVAL_MINUTES = 30


@dataclass
class HeartbeatStatus:
    running: bool
    interval_minutes: Optional[int]
    last_tick_at: Optional[str]
    tick_count: int


class Heartbeat:
    """Owns the repeating run-all-agents timer."""

    def __init__(self, orchestrator, store: MemoryStore,
                 scheduler: Optional[AsyncIOScheduler] = None):
        self.orchestrator = orchestrator
        self.store = store
        self.scheduler = scheduler or AsyncIOScheduler()
        self._interval_minutes: Optional[int] = None
        self._last_tick_at: Optional[str] = None
        self._tick_count = 0

    @property
    def is_running(self) -> bool:
        return self.scheduler.running and self.scheduler.get_job(JOB_ID) is not None

    def start(self, interval_minutes: int = DEFAULT_INTERVAL_MINUTES) -> dict:
        """
        Arm the timer. Must be called from inside the running event loop.

        Returns {"started": False, ...} with the current interval if the
        heartbeat is already running.
        """
        if self.is_running:
            return {"started": False, "interval_minutes": self._interval_minutes}

        if not self.scheduler.running:
            self.scheduler.start()

        self.scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(minutes=interval_minutes),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._interval_minutes = interval_minutes
        logger.info(f"Heartbeat started: every {interval_minutes} minutes")
        return {"started": True, "interval_minutes": interval_minutes}

    def stop(self) -> bool:
        """Disarm the timer. Returns whether it was running."""
        if not self.is_running:
            return False
        self.scheduler.remove_job(JOB_ID)
        self._interval_minutes = None
        logger.info("Heartbeat stopped")
        return True

    def status(self) -> HeartbeatStatus:
        running = self.is_running
        return HeartbeatStatus(
            running=running,
            interval_minutes=self._interval_minutes if running else None,
            last_tick_at=self._last_tick_at,
            tick_count=self._tick_count,
        )

    async def tick(self):
        """One heartbeat: run all agents, log a summary, stamp monitors. Never raises."""
        try:
            results = await self.orchestrator.run_all_agents()
            total_insights = sum(len(r.insights) for r in results)

            await self.store.add_conversation(
                role="agent",
                agent_id=HEARTBEAT_AGENT_ID,
                content=f"Heartbeat ran {len(results)} agent(s), produced {total_insights} insight(s).",
            )

            # run_all_agents did its own load/save cycles; stamp the latest state
            stamped = await self.store.touch_monitors()
            logger.info(
                f"Heartbeat tick: {len(results)} agent(s), {total_insights} insight(s), "
                f"{stamped} monitor(s) stamped"
            )
        except Exception as e:
            logger.error(f"Heartbeat tick failed: {e}", exc_info=True)
        finally:
            self._tick_count += 1
            self._last_tick_at = datetime.now(timezone.utc).isoformat()

    def shutdown(self):
        """Stop the scheduler entirely (process exit)."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
