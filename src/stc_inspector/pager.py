"""Back/forward pagination over a forward-only event log.

The log can only be read forward, so "previous" is implemented with a stack
of the cursors each earlier page was loaded from. The stack belongs to the
viewer, not to the log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stc_inspector.backends.base import Cursor
from stc_inspector.classifier import EVENT_KINDS, event_kind, event_str_field
from stc_inspector.reader import EventLogReader

ALL_KINDS = "all"
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class EventFilters:
    kind: str = ALL_KINDS
    workflow: str = ""
    task: str = ""

    def __post_init__(self) -> None:
        if self.kind != ALL_KINDS and self.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind filter: {self.kind!r}")

    def matches(self, event: Any) -> bool:
        if self.kind != ALL_KINDS and event_kind(event) != self.kind:
            return False
        return _contains(event, "workflow_id", self.workflow) and _contains(
            event, "task_id", self.task
        )


def _contains(event: Any, attr: str, query: str) -> bool:
    if not query:
        return True
    value = event_str_field(event, attr)
    return value is not None and query in value


@dataclass(frozen=True, slots=True)
class EventPage:
    page: int
    events: list[Any]
    raw_count: int
    has_prev: bool
    has_next: bool


@dataclass
class EventPager:
    reader: EventLogReader
    page_size: int = DEFAULT_PAGE_SIZE
    filters: EventFilters = field(default_factory=EventFilters)

    page: int = field(default=1, init=False)
    cursor_stack: list[Cursor] = field(default_factory=list, init=False)
    current_cursor: Cursor = field(default=None, init=False)
    next_cursor: Cursor = field(default=None, init=False)
    raw_events: list[Any] = field(default_factory=list, init=False)
    events: list[Any] = field(default_factory=list, init=False)
    has_next: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be positive")

    def snapshot(self) -> EventPage:
        return EventPage(
            page=self.page,
            events=list(self.events),
            raw_count=len(self.raw_events),
            has_prev=self.page > 1,
            has_next=self.has_next,
        )

    def load_first(self) -> EventPage:
        self.page = 1
        self.cursor_stack = []
        self._load(self.reader.origin())
        return self.snapshot()

    def next_page(self) -> EventPage:
        if not self.has_next:
            return self.snapshot()
        self.cursor_stack.append(self.current_cursor)
        self.page += 1
        self._load(self.next_cursor)
        return self.snapshot()

    def prev_page(self) -> EventPage:
        if self.page <= 1:
            return self.snapshot()
        cursor = self.cursor_stack.pop() if self.cursor_stack else None
        self.page -= 1
        self._load(cursor if cursor is not None else self.reader.origin())
        return self.snapshot()

    def refresh(self) -> EventPage:
        # Only the head page follows the live log; older pages stay put while read.
        if self.page == 1:
            self._load(self.reader.origin())
        return self.snapshot()

    def set_filters(self, filters: EventFilters) -> EventPage:
        self.filters = filters
        return self.load_first()

    def _load(self, cursor: Cursor) -> None:
        events, next_cursor = self.reader.fetch(cursor, self.page_size)
        # Look ahead one event without consuming it to decide whether "next" exists.
        peek, _ = self.reader.fetch(next_cursor, 1)

        self.current_cursor = cursor
        self.next_cursor = next_cursor
        self.raw_events = events
        self.events = [e for e in events if self.filters.matches(e)]
        self.has_next = bool(peek)
