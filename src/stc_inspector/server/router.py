"""Dashboard-focused REST API.

Every route recomputes its view from the engine's stores; nothing is cached
between requests. Store outages show up as empty lists and null trees rather
than errors.

All routes are mounted under `/api`.
"""

from __future__ import annotations

import reprlib

from fastapi import APIRouter, HTTPException, Query, Request

from stc_inspector import __version__
from stc_inspector.inspector import Inspector
from stc_inspector.pager import EventFilters, EventPager
from stc_inspector.server.config import ServerSettings
from stc_inspector.server.models import (
    ApiEvent,
    ApiEventPage,
    ApiOverview,
    ApiScheduler,
    ApiTask,
    ApiWorkflowDetail,
    ApiWorkflowSummary,
    PagerFilters,
)
from stc_inspector.server.pager_store import PagerSession, PagerStore

router = APIRouter()

_state_repr = reprlib.Repr()
_state_repr.maxstring = 200
_state_repr.maxother = 200


def _inspector(request: Request) -> Inspector:
    inspector = getattr(request.app.state, "inspector", None)
    if not isinstance(inspector, Inspector):
        raise HTTPException(status_code=500, detail="Inspector not configured")
    return inspector


def _settings(request: Request) -> ServerSettings:
    settings = getattr(request.app.state, "settings", None)
    if not isinstance(settings, ServerSettings):
        raise HTTPException(status_code=500, detail="Server settings not configured")
    return settings


def _pagers(request: Request) -> PagerStore:
    store = getattr(request.app.state, "pagers", None)
    if not isinstance(store, PagerStore):
        raise HTTPException(status_code=500, detail="Pager store not configured")
    return store


def _session_or_404(request: Request, pager_id: str) -> PagerSession:
    session = _pagers(request).get(pager_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Pager session not found")
    return session


def _to_event_filters(filters: PagerFilters) -> EventFilters:
    return EventFilters(kind=filters.kind, workflow=filters.workflow, task=filters.task)


def _page_response(session: PagerSession, pager: EventPager) -> ApiEventPage:
    filters = PagerFilters.model_validate(
        {
            "kind": pager.filters.kind,
            "workflow": pager.filters.workflow,
            "task": pager.filters.task,
        }
    )
    return ApiEventPage.from_page(session.pager_id, pager.snapshot(), filters)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/overview", response_model=ApiOverview)
def overview(
    request: Request, recent: int | None = Query(default=None, ge=0, le=1000)
) -> ApiOverview:
    ov = _inspector(request).overview(recent)
    return ApiOverview(
        total_events=ov.total_events,
        counts=dict(sorted(ov.counts.items())),
        scheduler_count=ov.scheduler_count,
        active_tasks=ov.active_tasks,
        pending_ready=ov.pending_ready,
        recent_events=[ApiEvent.from_event(e) for e in ov.recent_events],
        refresh_seconds=_settings(request).refresh_seconds,
    )


@router.get("/events", response_model=list[ApiEvent])
def recent_events(
    request: Request, limit: int = Query(default=50, ge=1, le=1000)
) -> list[ApiEvent]:
    return [ApiEvent.from_event(e) for e in _inspector(request).recent_events(limit)]


@router.get("/events/counts")
def event_counts(request: Request) -> dict[str, int]:
    return dict(sorted(_inspector(request).event_counts().items()))


@router.post("/events/pagers", response_model=ApiEventPage)
def create_pager(request: Request, filters: PagerFilters | None = None) -> ApiEventPage:
    pager = _inspector(request).pager(_to_event_filters(filters or PagerFilters()))
    session = _pagers(request).create(pager)
    return _page_response(session, pager)


@router.get("/events/pagers/{pager_id}", response_model=ApiEventPage)
def refresh_pager(request: Request, pager_id: str) -> ApiEventPage:
    session = _session_or_404(request, pager_id)
    with session.lock:
        session.pager.refresh()
        return _page_response(session, session.pager)


@router.post("/events/pagers/{pager_id}/next", response_model=ApiEventPage)
def next_page(request: Request, pager_id: str) -> ApiEventPage:
    session = _session_or_404(request, pager_id)
    with session.lock:
        session.pager.next_page()
        return _page_response(session, session.pager)


@router.post("/events/pagers/{pager_id}/prev", response_model=ApiEventPage)
def prev_page(request: Request, pager_id: str) -> ApiEventPage:
    session = _session_or_404(request, pager_id)
    with session.lock:
        session.pager.prev_page()
        return _page_response(session, session.pager)


@router.put("/events/pagers/{pager_id}/filters", response_model=ApiEventPage)
def set_pager_filters(request: Request, pager_id: str, filters: PagerFilters) -> ApiEventPage:
    session = _session_or_404(request, pager_id)
    with session.lock:
        session.pager.set_filters(_to_event_filters(filters))
        return _page_response(session, session.pager)


@router.delete("/events/pagers/{pager_id}")
def delete_pager(request: Request, pager_id: str) -> dict[str, object]:
    if not _pagers(request).delete(pager_id):
        raise HTTPException(status_code=404, detail="Pager session not found")
    return {"ok": True}


@router.get("/workflows", response_model=list[ApiWorkflowSummary])
def list_workflows(request: Request) -> list[ApiWorkflowSummary]:
    return [
        ApiWorkflowSummary(workflow_id=wf_id, status=status)
        for wf_id, status in _inspector(request).workflow_summaries()
    ]


@router.get("/workflows/{workflow_id}", response_model=ApiWorkflowDetail)
def get_workflow(request: Request, workflow_id: str) -> ApiWorkflowDetail:
    detail = _inspector(request).workflow_detail(workflow_id)
    if detail.is_empty:
        raise HTTPException(status_code=404, detail="No program or events found for workflow")

    tasks = [
        ApiTask(
            task_id=task_id,
            module=detail.task_modules.get(task_id),
            status=detail.task_statuses[task_id],
            events=[ApiEvent.from_event(e) for e in events],
        )
        for task_id, events in detail.events_by_task.items()
    ]
    return ApiWorkflowDetail(
        workflow_id=detail.workflow_id,
        status=detail.status,
        task_count=len(tasks),
        event_count=detail.event_count,
        dag=detail.dag.to_json() if detail.dag is not None else None,
        tasks=tasks,
        unstarted_task_ids=detail.unstarted_task_ids,
    )


@router.get("/programs")
def list_programs(request: Request) -> list[str]:
    return _inspector(request).list_workflow_ids()


@router.get("/programs/{workflow_id}/dag")
def program_dag(request: Request, workflow_id: str) -> dict[str, object]:
    dag = _inspector(request).build_program_dag(workflow_id)
    return {"workflow_id": workflow_id, "dag": dag.to_json() if dag is not None else None}


@router.get("/schedulers", response_model=list[ApiScheduler])
def list_schedulers(request: Request) -> list[ApiScheduler]:
    return [
        ApiScheduler(
            scheduler_id=info.scheduler_id,
            handle=_state_repr.repr(info.handle),
            available=info.state is not None,
            state=_state_repr.repr(info.state) if info.state is not None else None,
        )
        for info in _inspector(request).list_schedulers()
    ]
