"""Forward-only traversal of the event log.

The backend only knows how to read forward from a cursor, so every aggregate
(counts, workflow discovery, per-workflow filtering, "recent" tails) is a full
replay from the origin. That is O(log length) per call, which is fine for a
development tool and means there is no derived index to keep in sync.
"""

from __future__ import annotations

import logging
from collections import Counter, deque
from typing import Any

from stc_inspector.backends.base import Cursor, EventLog
from stc_inspector.classifier import event_kind, event_str_field

logger = logging.getLogger(__name__)

REPLAY_PAGE_SIZE = 500


class EventLogReader:
    """Soft-failing reader over an :class:`EventLog`.

    Backend errors are logged and degrade to empty results; nothing raises.
    """

    def __init__(self, event_log: EventLog, *, replay_page_size: int = REPLAY_PAGE_SIZE) -> None:
        self._log = event_log
        self._replay_page_size = replay_page_size

    def origin(self) -> Cursor:
        try:
            return self._log.origin()
        except Exception:
            logger.warning("Event log origin unavailable", exc_info=True)
            return None

    def fetch(self, cursor: Cursor, limit: int) -> tuple[list[Any], Cursor]:
        try:
            events, next_cursor = self._log.fetch(cursor, limit=limit)
        except Exception:
            logger.warning(
                "Event log fetch failed",
                extra={"cursor": cursor, "limit": limit},
                exc_info=True,
            )
            return [], cursor
        return list(events), next_cursor

    def replay_all(self, cursor: Cursor = None) -> list[Any]:
        """Read every event after ``cursor`` (the origin when omitted)."""

        if cursor is None:
            cursor = self.origin()

        out: list[Any] = []
        while True:
            events, next_cursor = self.fetch(cursor, self._replay_page_size)
            if not events:
                break
            out.extend(events)
            if next_cursor == cursor:
                logger.warning("Event log cursor did not advance; stopping replay")
                break
            cursor = next_cursor
        return out

    def recent(self, n: int) -> list[Any]:
        """Return the last ``n`` events, oldest first."""

        if n <= 0:
            return []
        # There is no reverse cursor, so the tail costs a full replay.
        return list(deque(self.replay_all(), maxlen=n))

    def counts(self) -> dict[str, int]:
        return dict(Counter(event_kind(e) for e in self.replay_all()))

    def workflow_ids(self) -> list[str]:
        """Distinct workflow ids in order of first appearance."""

        seen: dict[str, None] = {}
        for event in self.replay_all():
            workflow_id = event_str_field(event, "workflow_id")
            if workflow_id is not None:
                seen.setdefault(workflow_id, None)
        return list(seen)

    def events_for_workflow(self, workflow_id: str) -> list[Any]:
        return [e for e in self.replay_all() if event_str_field(e, "workflow_id") == workflow_id]
