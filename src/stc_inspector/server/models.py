"""Pydantic models for the dashboard API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from stc_inspector.classifier import (
    event_detail,
    event_field,
    event_kind,
    event_str_field,
    short_id,
)
from stc_inspector.pager import EventPage
from stc_inspector.status import WorkflowStatus

KindFilter = Literal[
    "all", "ready", "started", "completed", "failed", "pending", "preempted", "progress"
]


class ApiEvent(BaseModel):
    kind: str
    workflow_id: str | None = None
    task_id: str | None = None
    workflow_short_id: str
    task_short_id: str
    timestamp: datetime | None = None
    detail: str = ""

    @classmethod
    def from_event(cls, event: Any) -> ApiEvent:
        workflow_id = event_str_field(event, "workflow_id")
        task_id = event_str_field(event, "task_id")
        ts = event_field(event, "timestamp")
        return cls(
            kind=event_kind(event),
            workflow_id=workflow_id,
            task_id=task_id,
            workflow_short_id=short_id(workflow_id),
            task_short_id=short_id(task_id),
            timestamp=ts if isinstance(ts, datetime) else None,
            detail=event_detail(event),
        )


class PagerFilters(BaseModel):
    kind: KindFilter = "all"
    workflow: str = ""
    task: str = ""


class ApiEventPage(BaseModel):
    pager_id: str
    page: int
    events: list[ApiEvent]
    shown: int
    raw_count: int
    has_prev: bool
    has_next: bool
    filters: PagerFilters

    @classmethod
    def from_page(cls, pager_id: str, page: EventPage, filters: PagerFilters) -> ApiEventPage:
        events = [ApiEvent.from_event(e) for e in page.events]
        return cls(
            pager_id=pager_id,
            page=page.page,
            events=events,
            shown=len(events),
            raw_count=page.raw_count,
            has_prev=page.has_prev,
            has_next=page.has_next,
            filters=filters,
        )


class ApiOverview(BaseModel):
    total_events: int
    counts: dict[str, int]
    scheduler_count: int
    active_tasks: int
    pending_ready: int
    recent_events: list[ApiEvent]
    refresh_seconds: float


class ApiWorkflowSummary(BaseModel):
    workflow_id: str
    status: WorkflowStatus


class ApiTask(BaseModel):
    task_id: str
    module: str | None = None
    status: WorkflowStatus
    events: list[ApiEvent] = Field(default_factory=list)


class ApiWorkflowDetail(BaseModel):
    workflow_id: str
    status: WorkflowStatus
    task_count: int
    event_count: int
    dag: dict[str, Any] | None = None
    tasks: list[ApiTask] = Field(default_factory=list)
    unstarted_task_ids: list[str] = Field(default_factory=list)


class ApiScheduler(BaseModel):
    scheduler_id: str
    handle: str
    available: bool
    state: str | None = None
