"""Data access layer for the STC dashboard.

All methods are safe to call even when the engine's stores are down: they
log the failure and return an empty result instead of raising, so views keep
rendering placeholders while the observed system is partially unavailable.

NOTE: scheduler state is an opaque snapshot taken at a different instant from
the event log. The overview combines both without reconciling them.
"""

from __future__ import annotations

import logging
from collections.abc import Sized
from dataclasses import dataclass, field
from typing import Any

from stc_inspector.backends.base import Cursor, EventLog, ProgramStore, SchedulerRegistry
from stc_inspector.classifier import event_str_field
from stc_inspector.config import InspectorSettings
from stc_inspector.dag import ProgramNode, iter_task_ids, walk
from stc_inspector.events import Ready
from stc_inspector.pager import EventFilters, EventPager
from stc_inspector.program import Program
from stc_inspector.reader import EventLogReader
from stc_inspector.status import WorkflowStatus, events_by_task, task_statuses, workflow_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SchedulerInfo:
    scheduler_id: str
    handle: Any
    state: Any | None


@dataclass(frozen=True, slots=True)
class Overview:
    total_events: int
    counts: dict[str, int]
    scheduler_count: int
    active_tasks: int
    pending_ready: int
    recent_events: list[Any]


@dataclass(frozen=True, slots=True)
class WorkflowDetail:
    workflow_id: str
    status: WorkflowStatus
    dag: ProgramNode | None
    events_by_task: dict[str, list[Any]]
    task_statuses: dict[str, WorkflowStatus]
    task_modules: dict[str, str | None]
    # Tasks present in the program structure that have not emitted any event yet.
    unstarted_task_ids: list[str] = field(default_factory=list)

    @property
    def event_count(self) -> int:
        return sum(len(evs) for evs in self.events_by_task.values())

    @property
    def is_empty(self) -> bool:
        return self.dag is None and not self.events_by_task


def _sized_attr(state: Any, name: str) -> int:
    # Best effort: scheduler state is opaque, these fields may not exist.
    value = getattr(state, name, None)
    if value is None and isinstance(state, dict):
        value = state.get(name)
    return len(value) if isinstance(value, Sized) else 0


class Inspector:
    """Handle bundling the engine's stores for one dashboard process.

    Construct one at startup and pass it down; there is no module-level
    registry of backends.
    """

    def __init__(
        self,
        event_log: EventLog,
        program_store: ProgramStore,
        schedulers: SchedulerRegistry | None = None,
        settings: InspectorSettings | None = None,
    ) -> None:
        self.settings = settings or InspectorSettings()
        self.reader = EventLogReader(event_log, replay_page_size=self.settings.replay_page_size)
        self._programs = program_store
        self._schedulers = schedulers

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def event_origin(self) -> Cursor:
        return self.reader.origin()

    def fetch_events(self, cursor: Cursor, limit: int | None = None) -> tuple[list[Any], Cursor]:
        return self.reader.fetch(cursor, self.settings.page_size if limit is None else limit)

    def recent_events(self, limit: int | None = None) -> list[Any]:
        return self.reader.recent(self.settings.recent_limit if limit is None else limit)

    def event_counts(self) -> dict[str, int]:
        return self.reader.counts()

    def list_workflow_ids_from_events(self) -> list[str]:
        return self.reader.workflow_ids()

    def fetch_events_for_workflow(self, workflow_id: str) -> list[Any]:
        return self.reader.events_for_workflow(workflow_id)

    def pager(self, filters: EventFilters | None = None) -> EventPager:
        pager = EventPager(
            reader=self.reader,
            page_size=self.settings.page_size,
            filters=filters or EventFilters(),
        )
        pager.load_first()
        return pager

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def list_workflow_ids(self) -> list[str]:
        """Workflow ids with a stored program, sorted."""

        try:
            return sorted(self._programs.list_workflow_ids())
        except Exception:
            logger.warning("Program store listing failed", exc_info=True)
            return []

    def get_program(self, workflow_id: str) -> Program | None:
        try:
            return self._programs.get(workflow_id)
        except Exception:
            logger.warning(
                "Program store lookup failed", extra={"workflow_id": workflow_id}, exc_info=True
            )
            return None

    def build_program_dag(self, workflow_id: str) -> ProgramNode | None:
        """Walk the stored program for ``workflow_id`` into a renderable tree.

        Returns None if no program is stored. The program is re-read on every
        call since the engine may overwrite it at any time.
        """

        program = self.get_program(workflow_id)
        if program is None:
            return None
        try:
            return walk(program, self.settings.dag_max_depth)
        except Exception:
            logger.warning(
                "Program walk failed", extra={"workflow_id": workflow_id}, exc_info=True
            )
            return None

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def workflow_status(self, events: list[Any]) -> WorkflowStatus:
        return workflow_status(events)

    def workflow_summaries(self) -> list[tuple[str, WorkflowStatus]]:
        """Every workflow seen in the log with its status, from a single replay."""

        grouped: dict[str, list[Any]] = {}
        for event in self.reader.replay_all():
            workflow_id = event_str_field(event, "workflow_id")
            if workflow_id is not None:
                grouped.setdefault(workflow_id, []).append(event)
        return [(wf_id, self.workflow_status(evs)) for wf_id, evs in grouped.items()]

    def workflow_detail(self, workflow_id: str) -> WorkflowDetail:
        events = self.fetch_events_for_workflow(workflow_id)
        by_task = events_by_task(events)
        dag = self.build_program_dag(workflow_id)

        modules: dict[str, str | None] = {}
        for task_id, task_events in by_task.items():
            modules[task_id] = next(
                (e.module for e in task_events if isinstance(e, Ready)), None
            )

        return WorkflowDetail(
            workflow_id=workflow_id,
            status=self.workflow_status(events),
            dag=dag,
            events_by_task=by_task,
            task_statuses=task_statuses(events),
            task_modules=modules,
            unstarted_task_ids=[t for t in iter_task_ids(dag) if t not in by_task],
        )

    # ------------------------------------------------------------------
    # Schedulers
    # ------------------------------------------------------------------

    def list_schedulers(self) -> list[SchedulerInfo]:
        if self._schedulers is None:
            return []
        try:
            listed = self._schedulers.list()
        except Exception:
            logger.warning("Scheduler listing failed", exc_info=True)
            return []
        return [
            SchedulerInfo(scheduler_id=sid, handle=handle, state=self.get_scheduler_state(sid))
            for sid, handle in listed
        ]

    def get_scheduler_state(self, scheduler_id: str) -> Any | None:
        if self._schedulers is None:
            return None
        try:
            return self._schedulers.get_state(scheduler_id)
        except Exception:
            # Schedulers may exit between listing and introspection.
            logger.warning(
                "Scheduler state unavailable", extra={"scheduler_id": scheduler_id}, exc_info=True
            )
            return None

    # ------------------------------------------------------------------
    # Overview
    # ------------------------------------------------------------------

    def overview(self, recent_limit: int | None = None) -> Overview:
        counts = self.event_counts()
        schedulers = self.list_schedulers()
        states = [s.state for s in schedulers if s.state is not None]
        return Overview(
            total_events=sum(counts.values()),
            counts=counts,
            scheduler_count=len(schedulers),
            active_tasks=sum(_sized_attr(s, "active_tasks") for s in states),
            pending_ready=sum(_sized_attr(s, "pending_ready") for s in states),
            recent_events=self.recent_events(recent_limit),
        )
