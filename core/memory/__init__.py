"""
Insight memory.

One JSON file, one aggregate:
- UserProfile: what to watch
- MonitorTarget: channels/keywords under watch
- InsightEntry: agent findings (capped)
- ConversationEntry: activity log (capped)

MemoryStore owns all reads and writes.
"""

from .models import (
    ConversationEntry,
    InsightEntry,
    InsightSource,
    MemoryState,
    MonitorTarget,
    UserProfile,
)
from .store import MemoryStore, MemoryStoreError

__all__ = [
    "MemoryStore", "MemoryStoreError",
    "MemoryState", "UserProfile", "MonitorTarget",
    "InsightEntry", "InsightSource", "ConversationEntry",
]
