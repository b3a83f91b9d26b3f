"""Abstract interfaces for the stores the inspector reads from.

These are owned by the orchestration engine. The inspector only reads, and
any of them may be unavailable at any time.
"""

from abc import ABC, abstractmethod
from typing import Any

from stc_inspector.program import Program

Cursor = Any


class EventLog(ABC):
    """Append-only event log with forward-only cursors."""

    @abstractmethod
    def origin(self) -> Cursor:
        """Return the cursor positioned before every event."""
        pass

    @abstractmethod
    def fetch(self, cursor: Cursor, *, limit: int) -> tuple[list[Any], Cursor]:
        """Fetch up to ``limit`` events strictly after ``cursor``.

        Args:
            cursor: Position to read after.
            limit: Maximum number of events to return.

        Returns:
            The events in log order, and the cursor following the last one
            returned (``cursor`` itself when nothing was returned).
        """
        pass


class ProgramStore(ABC):
    """Keyed store of workflow programs (last write wins)."""

    @abstractmethod
    def get(self, workflow_id: str) -> Program | None:
        """Return the stored program, or None when nothing is stored."""
        pass

    @abstractmethod
    def list_workflow_ids(self) -> list[str]:
        """Return the ids of all workflows with a stored program."""
        pass


class SchedulerRegistry(ABC):
    """Running schedulers and their (opaque) state snapshots."""

    @abstractmethod
    def list(self) -> list[tuple[str, Any]]:  # noqa: A003
        """Return ``(scheduler_id, handle)`` pairs."""
        pass

    @abstractmethod
    def get_state(self, scheduler_id: str) -> Any | None:
        """Return the scheduler's current state, or None if it is gone."""
        pass
