"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from stc_inspector.backends.base import EventLog, ProgramStore, SchedulerRegistry
from stc_inspector.backends.memory import (
    MemoryEventLog,
    MemoryProgramStore,
    MemorySchedulerRegistry,
)
from stc_inspector.config import InspectorSettings
from stc_inspector.events import Completed, Failed, Ready, Started
from stc_inspector.inspector import Inspector

T0 = datetime(2025, 1, 1, tzinfo=UTC)


class BrokenEventLog(EventLog):
    """An event log whose backend is down."""

    def origin(self) -> Any:
        raise ConnectionError("event log unavailable")

    def fetch(self, cursor: Any, *, limit: int) -> tuple[list[Any], Any]:
        raise ConnectionError("event log unavailable")


class BrokenProgramStore(ProgramStore):
    def get(self, workflow_id: str) -> Any:
        raise ConnectionError("program store unavailable")

    def list_workflow_ids(self) -> list[str]:
        raise ConnectionError("program store unavailable")


class BrokenSchedulerRegistry(SchedulerRegistry):
    def list(self) -> list[tuple[str, Any]]:  # noqa: A003
        raise ConnectionError("schedulers unavailable")

    def get_state(self, scheduler_id: str) -> Any:
        raise ConnectionError("schedulers unavailable")


def task_history(workflow_id: str, task_id: str, *kinds: str) -> list[Any]:
    """Build a task's event history from kind names, with increasing timestamps."""

    out: list[Any] = []
    attempt = 1
    for i, kind in enumerate(kinds):
        ts = T0 + timedelta(seconds=i)
        common = {"workflow_id": workflow_id, "task_id": task_id, "timestamp": ts}
        if kind == "ready":
            out.append(Ready(module="MyApp.Task", payload={}, **common))
        elif kind == "started":
            out.append(Started(agent_ids=("agent-1",), **common))
        elif kind == "failed":
            out.append(Failed(attempt=attempt, reason="boom", retriable=True, **common))
            attempt += 1
        elif kind == "completed":
            out.append(Completed(attempt=attempt, result="ok", **common))
        else:
            raise ValueError(kind)
    return out


@pytest.fixture
def settings() -> InspectorSettings:
    return InspectorSettings(_env_file=None)


@pytest.fixture
def event_log() -> MemoryEventLog:
    return MemoryEventLog()


@pytest.fixture
def program_store() -> MemoryProgramStore:
    return MemoryProgramStore()


@pytest.fixture
def schedulers() -> MemorySchedulerRegistry:
    return MemorySchedulerRegistry()


@pytest.fixture
def inspector(
    event_log: MemoryEventLog,
    program_store: MemoryProgramStore,
    schedulers: MemorySchedulerRegistry,
    settings: InspectorSettings,
) -> Inspector:
    return Inspector(event_log, program_store, schedulers=schedulers, settings=settings)


@pytest.fixture
def broken_inspector(settings: InspectorSettings) -> Inspector:
    return Inspector(
        BrokenEventLog(),
        BrokenProgramStore(),
        schedulers=BrokenSchedulerRegistry(),
        settings=settings,
    )


@pytest.fixture
def history() -> Callable[..., list[Any]]:
    return task_history
