"""Synthetic workflows for working on the dashboard without a live engine.

Programs are built with the same builders the engine uses, so the structure
walker renders them exactly as it would real ones.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from stc_inspector.backends.memory import MemoryEventLog, MemoryProgramStore
from stc_inspector.events import Completed, Failed, Ready, Started
from stc_inspector.program import parallel, run, sequence

logger = logging.getLogger(__name__)


class _Emitter:
    def __init__(self, event_log: MemoryEventLog, workflow_id: str, t0: datetime) -> None:
        self._log = event_log
        self._workflow_id = workflow_id
        self._t0 = t0

    def _at(self, secs: int) -> datetime:
        return self._t0 + timedelta(seconds=secs)

    def ready(self, task_id: str, module: str, secs: int) -> None:
        self._log.append(
            Ready(
                workflow_id=self._workflow_id,
                task_id=task_id,
                module=module,
                payload={},
                timestamp=self._at(secs),
            )
        )

    def started(self, task_id: str, agents: list[str], secs: int) -> None:
        self._log.append(
            Started(
                workflow_id=self._workflow_id,
                task_id=task_id,
                agent_ids=tuple(agents),
                timestamp=self._at(secs),
            )
        )

    def completed(
        self, task_id: str, module: str, agents: list[str], secs: int, *, attempt: int = 1
    ) -> None:
        self.ready(task_id, module, secs)
        self.started(task_id, agents, secs + 1)
        self._log.append(
            Completed(
                workflow_id=self._workflow_id,
                task_id=task_id,
                attempt=attempt,
                result=("ok", "done"),
                timestamp=self._at(secs + 2),
            )
        )


def seed_demo(
    event_log: MemoryEventLog,
    program_store: MemoryProgramStore,
    *,
    now: datetime | None = None,
    suffix: Callable[[], str] | None = None,
) -> list[str]:
    """Insert four demo workflows and return their ids.

    - a straight sequence, all completed
    - a parallel fan-out followed by an aggregate step, all completed
    - an in-progress sequence (one done, one running, one not yet started)
    - a sequence whose upload step failed once and completed on retry
    """

    t0 = now or datetime.now(tz=UTC)
    sfx = suffix or (lambda: secrets.token_hex(3))
    workflow_ids: list[str] = []

    # Straight sequence A -> B -> C.
    wf = f"wf-seq-{sfx()}"
    ta, tb, tc = f"task-fetch-{sfx()}", f"task-transform-{sfx()}", f"task-store-{sfx()}"
    program_store.put(
        wf,
        sequence(
            [
                run("MyApp.FetchTask", {"source": "db"}, ta),
                run("MyApp.TransformTask", {"format": "json"}, tb),
                run("MyApp.StoreTask", {"dest": "s3"}, tc),
            ]
        ),
    )
    emit = _Emitter(event_log, wf, t0)
    emit.completed(ta, "MyApp.FetchTask", ["agent-1"], 0)
    emit.completed(tb, "MyApp.TransformTask", ["agent-1"], 3)
    emit.completed(tc, "MyApp.StoreTask", ["agent-1"], 6)
    workflow_ids.append(wf)

    # parallel([A, B]) -> C
    wf = f"wf-par-{sfx()}"
    ta, tb = f"task-fetch-db-{sfx()}", f"task-fetch-api-{sfx()}"
    tc = f"task-aggregate-{sfx()}"
    program_store.put(
        wf,
        sequence(
            [
                parallel(
                    [
                        run("MyApp.FetchDbTask", {"table": "users"}, ta),
                        run("MyApp.FetchApiTask", {"endpoint": "/events"}, tb),
                    ]
                ),
                run("MyApp.AggregateTask", {"strategy": "merge"}, tc),
            ]
        ),
    )
    emit = _Emitter(event_log, wf, t0)
    emit.completed(ta, "MyApp.FetchDbTask", ["agent-1"], 0)
    emit.completed(tb, "MyApp.FetchApiTask", ["agent-2"], 0)
    emit.completed(tc, "MyApp.AggregateTask", ["agent-1"], 4)
    workflow_ids.append(wf)

    # In progress: first done, second running, third has no events yet.
    wf = f"wf-live-{sfx()}"
    ta, tb, tc = f"task-init-{sfx()}", f"task-process-{sfx()}", f"task-notify-{sfx()}"
    program_store.put(
        wf,
        sequence(
            [
                run("MyApp.InitTask", {}, ta),
                run("MyApp.ProcessTask", {"batch": 100}, tb),
                run("MyApp.NotifyTask", {"channel": "slack"}, tc),
            ]
        ),
    )
    emit = _Emitter(event_log, wf, t0)
    emit.completed(ta, "MyApp.InitTask", ["agent-1"], 0)
    emit.ready(tb, "MyApp.ProcessTask", 2)
    emit.started(tb, ["agent-1"], 3)
    workflow_ids.append(wf)

    # Retry: upload fails on attempt 1, completes on attempt 2.
    wf, ta, tb = f"wf-retry-{sfx()}", f"task-validate-{sfx()}", f"task-upload-{sfx()}"
    program_store.put(
        wf,
        sequence(
            [
                run("MyApp.ValidateTask", {"schema": "v2"}, ta),
                run("MyApp.UploadTask", {"bucket": "prod"}, tb),
            ]
        ),
    )
    emit = _Emitter(event_log, wf, t0)
    emit.completed(ta, "MyApp.ValidateTask", ["agent-1"], 0)
    emit.ready(tb, "MyApp.UploadTask", 3)
    emit.started(tb, ["agent-1"], 4)
    event_log.append(
        Failed(
            workflow_id=wf,
            task_id=tb,
            attempt=1,
            reason="connection_timeout",
            retriable=True,
            timestamp=t0 + timedelta(seconds=6),
        )
    )
    emit.ready(tb, "MyApp.UploadTask", 7)
    emit.started(tb, ["agent-2"], 8)
    event_log.append(
        Completed(
            workflow_id=wf,
            task_id=tb,
            attempt=2,
            result=("ok", "uploaded"),
            timestamp=t0 + timedelta(seconds=10),
        )
    )
    workflow_ids.append(wf)

    logger.info("Seeded demo workflows", extra={"workflow_ids": workflow_ids})
    return workflow_ids
