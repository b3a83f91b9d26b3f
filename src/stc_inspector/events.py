"""Event records as produced by the STC engine.

Events are immutable once appended. The only ordering guarantee is the order
in which the log returns them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class Event:
    workflow_id: str
    task_id: str | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Ready(Event):
    module: str | None = None
    payload: object = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Started(Event):
    agent_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True, kw_only=True)
class Completed(Event):
    attempt: int = 1
    result: object = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Failed(Event):
    attempt: int = 1
    reason: object = None
    retriable: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class Pending(Event):
    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class Preempted(Event):
    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class Progress(Event):
    progress: object = None
