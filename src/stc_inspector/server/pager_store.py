"""In-memory registry of event-log pager sessions.

Each dashboard tab holds its own cursor stack. The stack is view state, not
derived data, so it lives only as long as the process and is evicted oldest
first (least recently used) once the registry is full.
"""

from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass

from stc_inspector.pager import EventPager


@dataclass
class PagerSession:
    pager_id: str
    pager: EventPager
    lock: threading.Lock


class PagerStore:
    def __init__(self, max_sessions: int = 256) -> None:
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, PagerSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, pager: EventPager) -> PagerSession:
        session = PagerSession(pager_id=uuid.uuid4().hex, pager=pager, lock=threading.Lock())
        with self._lock:
            self._sessions[session.pager_id] = session
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)
        return session

    def get(self, pager_id: str) -> PagerSession | None:
        with self._lock:
            session = self._sessions.get(pager_id)
            if session is not None:
                self._sessions.move_to_end(pager_id)
            return session

    def delete(self, pager_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(pager_id, None) is not None
