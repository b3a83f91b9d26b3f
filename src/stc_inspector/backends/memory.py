"""In-memory backends for development and tests.

The event log cursor is the number of events already consumed, so the origin
is ``0``.
"""

from __future__ import annotations

import threading
from typing import Any

from stc_inspector.backends.base import EventLog, ProgramStore, SchedulerRegistry
from stc_inspector.program import Program


class MemoryEventLog(EventLog):
    def __init__(self, events: list[Any] | None = None) -> None:
        self._events: list[Any] = list(events or [])
        self._lock = threading.Lock()

    def append(self, event: Any) -> None:
        with self._lock:
            self._events.append(event)

    def extend(self, events: list[Any]) -> None:
        with self._lock:
            self._events.extend(events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def origin(self) -> int:
        return 0

    def fetch(self, cursor: int, *, limit: int) -> tuple[list[Any], int]:
        if not isinstance(cursor, int) or cursor < 0:
            raise ValueError(f"Invalid cursor: {cursor!r}")
        if limit <= 0:
            return [], cursor
        with self._lock:
            page = self._events[cursor : cursor + limit]
        return page, cursor + len(page)


class MemoryProgramStore(ProgramStore):
    def __init__(self) -> None:
        self._programs: dict[str, Program] = {}
        self._lock = threading.Lock()

    def put(self, workflow_id: str, program: Program) -> None:
        with self._lock:
            self._programs[workflow_id] = program

    def get(self, workflow_id: str) -> Program | None:
        with self._lock:
            return self._programs.get(workflow_id)

    def list_workflow_ids(self) -> list[str]:
        with self._lock:
            return list(self._programs)


class MemorySchedulerRegistry(SchedulerRegistry):
    def __init__(self) -> None:
        self._schedulers: dict[str, tuple[Any, Any]] = {}
        self._lock = threading.Lock()

    def register(self, scheduler_id: str, handle: Any, state: Any = None) -> None:
        with self._lock:
            self._schedulers[scheduler_id] = (handle, state)

    def remove(self, scheduler_id: str) -> None:
        with self._lock:
            self._schedulers.pop(scheduler_id, None)

    def list(self) -> list[tuple[str, Any]]:  # noqa: A003
        with self._lock:
            return [(sid, handle) for sid, (handle, _state) in self._schedulers.items()]

    def get_state(self, scheduler_id: str) -> Any | None:
        with self._lock:
            entry = self._schedulers.get(scheduler_id)
        if entry is None:
            return None
        return entry[1]
