"""Summarise a workflow's event history into a single status."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from stc_inspector.classifier import event_kind, event_str_field


class WorkflowStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def events_by_task(events: Iterable[object]) -> dict[str, list[object]]:
    """Group events by task id in first-seen order.

    Events that are not attributed to a task are dropped.
    """

    grouped: dict[str, list[object]] = {}
    for event in events:
        task_id = event_str_field(event, "task_id")
        if task_id is None:
            continue
        grouped.setdefault(task_id, []).append(event)
    return grouped


def task_status(events: Iterable[object]) -> WorkflowStatus:
    # A retried task that eventually completes reads as completed.
    kinds = {event_kind(e) for e in events}
    if "completed" in kinds:
        return WorkflowStatus.COMPLETED
    if "failed" in kinds:
        return WorkflowStatus.FAILED
    if "started" in kinds:
        return WorkflowStatus.RUNNING
    return WorkflowStatus.PENDING


def task_statuses(events: Iterable[object]) -> dict[str, WorkflowStatus]:
    return {task_id: task_status(evs) for task_id, evs in events_by_task(events).items()}


def workflow_status(events: Iterable[object]) -> WorkflowStatus:
    """Fold per-task statuses into one: running, then failed, then completed.

    An empty history is pending. Workflow-level events (no task id) carry no
    task state, so a history made only of them has nothing outstanding and
    reads as completed.
    """

    events = list(events)
    if not events:
        return WorkflowStatus.PENDING

    statuses = set(task_statuses(events).values())

    if WorkflowStatus.RUNNING in statuses:
        return WorkflowStatus.RUNNING
    if WorkflowStatus.FAILED in statuses:
        return WorkflowStatus.FAILED
    if all(s is WorkflowStatus.COMPLETED for s in statuses):
        return WorkflowStatus.COMPLETED
    return WorkflowStatus.PENDING
