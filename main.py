"""
YouTube MCP - Entry Point

Starts the MCP server that exposes:
1. YouTube Data API tools (search, comments, channel videos, channel search)
2. The four analysis agents and their orchestrator
3. Persistent memory (profile, monitors, insights, conversations)
4. The heartbeat that runs all agents on a timer

Usage:
    python main.py

Requires YOUTUBE_API_KEY in the environment or a .env file (see .env.example).
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

from agents.orchestrator import AgentOrchestrator
from core.config import Settings, load_settings
from core.heartbeat import Heartbeat
from core.memory import MemoryStore
from interfaces.mcp_server import build_mcp_server
from tools.tool_registry import build_registry
from tools.youtube_tool import YouTubeTool

logger = logging.getLogger("youtube_mcp")


def configure_logging(settings: Settings):
    # stdout carries the MCP stdio transport; logs go to stderr and the log file
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=handlers,
    )


class YouTubeMCPSystem:
    """Wires all components together."""

    def __init__(self, settings: Settings):
        self.settings = settings

        self.youtube = YouTubeTool(
            api_key=settings.youtube_api_key,
            timeout=settings.http_timeout,
        )
        self.store = MemoryStore(settings.memory_path)
        self.orchestrator = AgentOrchestrator(self.youtube, self.store)
        self.heartbeat = Heartbeat(self.orchestrator, self.store)
        self.registry = build_registry(
            youtube=self.youtube,
            store=self.store,
            orchestrator=self.orchestrator,
            heartbeat=self.heartbeat,
            default_interval_minutes=settings.heartbeat_interval_minutes,
        )
        self.mcp = build_mcp_server(self.registry)

    async def start(self):
        if not self.settings.youtube_api_key:
            logger.warning("YOUTUBE_API_KEY is not set; YouTube tools will return errors")
        logger.info(f"Memory file: {self.settings.memory_path}")
        logger.info(f"Starting MCP server ({self.settings.transport})")
        await self.mcp.run_async(transport=self.settings.transport)

    async def stop(self):
        self.heartbeat.shutdown()
        await self.youtube.close()
        logger.info("YouTube MCP stopped")


async def main():
    settings = load_settings()
    configure_logging(settings)

    system = YouTubeMCPSystem(settings)
    try:
        await system.start()
    finally:
        await system.stop()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
