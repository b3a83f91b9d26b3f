"""Store interfaces and the bundled in-memory implementations."""

from stc_inspector.backends.base import Cursor, EventLog, ProgramStore, SchedulerRegistry
from stc_inspector.backends.memory import (
    MemoryEventLog,
    MemoryProgramStore,
    MemorySchedulerRegistry,
)

__all__ = [
    "Cursor",
    "EventLog",
    "MemoryEventLog",
    "MemoryProgramStore",
    "MemorySchedulerRegistry",
    "ProgramStore",
    "SchedulerRegistry",
]
