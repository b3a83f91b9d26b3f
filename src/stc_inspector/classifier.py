"""Display helpers for event records.

Every function here is total: the log may carry records this version of the
inspector does not know about, and they still need a tag on screen.
"""

from __future__ import annotations

import reprlib
from collections.abc import Mapping

from stc_inspector.events import (
    Completed,
    Failed,
    Pending,
    Preempted,
    Progress,
    Ready,
    Started,
)

EVENT_KINDS: tuple[str, ...] = (
    "ready",
    "started",
    "completed",
    "failed",
    "pending",
    "preempted",
    "progress",
)

_KIND_BY_TYPE: dict[type, str] = {
    Ready: "ready",
    Started: "started",
    Completed: "completed",
    Failed: "failed",
    Pending: "pending",
    Preempted: "preempted",
    Progress: "progress",
}

_repr = reprlib.Repr()
_repr.maxlist = 3
_repr.maxdict = 3
_repr.maxtuple = 3
_repr.maxset = 3
_repr.maxstring = 40
_repr.maxother = 40


def event_kind(event: object) -> str:
    """Return the canonical kind tag for an event record."""

    for cls in type(event).__mro__:
        kind = _KIND_BY_TYPE.get(cls)
        if kind is not None:
            return kind

    # Fall back to whatever the record says about itself.
    declared: object = None
    if isinstance(event, Mapping):
        declared = event.get("kind") or event.get("type")
    else:
        declared = getattr(event, "kind", None)
    if isinstance(declared, str) and declared.strip():
        return declared.strip().lower()
    return type(event).__name__.lower()


def event_field(event: object, name: str) -> object:
    """Read ``name`` from an event record, be it an object or a mapping."""

    if isinstance(event, Mapping):
        return event.get(name)
    return getattr(event, name, None)


def event_str_field(event: object, name: str) -> str | None:
    value = event_field(event, name)
    return value if isinstance(value, str) else None


def short_id(value: str | None) -> str:
    if value is None:
        return "—"
    if len(value) <= 12:
        return value
    return value[:8] + "…"


def event_detail(event: object) -> str:
    """One-line, bounded description of the kind-specific fields."""

    if isinstance(event, Completed):
        return f"attempt={event.attempt} result={_repr.repr(event.result)}"
    if isinstance(event, Failed):
        return (
            f"attempt={event.attempt} retriable={str(event.retriable).lower()} "
            f"reason={_repr.repr(event.reason)}"
        )
    if isinstance(event, Started):
        return f"agents=[{', '.join(event.agent_ids or ())}]"
    if isinstance(event, Ready):
        return f"module={event.module}"
    if isinstance(event, Progress):
        return _repr.repr(event.progress)
    return ""
