from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient

from stc_inspector.backends.memory import (
    MemoryEventLog,
    MemoryProgramStore,
    MemorySchedulerRegistry,
)
from stc_inspector.inspector import Inspector
from stc_inspector.program import run, sequence
from stc_inspector.seeds import seed_demo
from stc_inspector.server.app import create_app

History = Callable[..., list[Any]]


@pytest.fixture(autouse=True)
def _server_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STC_INSPECTOR_SEED_DEMO", raising=False)
    monkeypatch.delenv("STC_INSPECTOR_PAGE_SIZE", raising=False)
    monkeypatch.setenv("STC_INSPECTOR_REFRESH_SECONDS", "5")


@pytest.fixture
def client(inspector: Inspector) -> TestClient:
    return TestClient(create_app(inspector))


def test_health(client: TestClient) -> None:
    """Test health."""
    health = client.get("/api/health").json()
    assert health["status"] == "ok"
    assert "version" in health


def test_overview_and_recent_events(
    client: TestClient,
    event_log: MemoryEventLog,
    schedulers: MemorySchedulerRegistry,
    history: History,
) -> None:
    """Test overview and recent events."""
    event_log.extend(history("wf-0123456789abcdef", "a", "ready", "started", "completed"))
    schedulers.register("sched-1", handle="<pid>", state={"pending_ready": ["x"]})

    ov = client.get("/api/overview", params={"recent": 2}).json()
    assert ov["total_events"] == 3
    assert ov["counts"] == {"completed": 1, "ready": 1, "started": 1}
    assert ov["scheduler_count"] == 1
    assert ov["pending_ready"] == 1
    assert ov["refresh_seconds"] == 5.0
    assert [e["kind"] for e in ov["recent_events"]] == ["started", "completed"]
    assert ov["recent_events"][0]["workflow_short_id"] == "wf-01234…"
    assert ov["recent_events"][1]["detail"] == "attempt=1 result='ok'"

    recent = client.get("/api/events", params={"limit": 1}).json()
    assert [e["kind"] for e in recent] == ["completed"]

    assert client.get("/api/events/counts").json() == {"completed": 1, "ready": 1, "started": 1}


def test_mapping_records_render_like_events(client: TestClient, event_log: MemoryEventLog) -> None:
    """Test mapping-shaped log records keep their ids in the API."""
    event_log.append({"kind": "Pending", "workflow_id": "wf-map", "task_id": "t-1"})

    [event] = client.get("/api/events").json()
    assert event["kind"] == "pending"
    assert event["workflow_id"] == "wf-map"
    assert event["task_id"] == "t-1"
    assert event["timestamp"] is None


def test_event_pager_session_roundtrip(
    client: TestClient, event_log: MemoryEventLog, history: History
) -> None:
    """Test event pager session roundtrip."""
    for i in range(60):
        event_log.extend(history(f"wf-{i % 3}", f"t{i}", "ready"))

    first = client.post("/api/events/pagers").json()
    pager_id = first["pager_id"]
    assert first["page"] == 1
    assert first["shown"] == 50
    assert first["has_prev"] is False
    assert first["has_next"] is True

    second = client.post(f"/api/events/pagers/{pager_id}/next").json()
    assert second["page"] == 2
    assert second["shown"] == 10
    assert second["has_next"] is False

    back = client.post(f"/api/events/pagers/{pager_id}/prev").json()
    assert back["page"] == 1
    assert back["events"] == first["events"]

    refreshed = client.get(f"/api/events/pagers/{pager_id}").json()
    assert refreshed["events"] == first["events"]

    filtered = client.put(
        f"/api/events/pagers/{pager_id}/filters", json={"workflow": "wf-1"}
    ).json()
    assert filtered["page"] == 1
    assert filtered["raw_count"] == 50
    assert {e["workflow_id"] for e in filtered["events"]} == {"wf-1"}
    assert filtered["filters"] == {"kind": "all", "workflow": "wf-1", "task": ""}

    assert client.delete(f"/api/events/pagers/{pager_id}").json() == {"ok": True}
    assert client.get(f"/api/events/pagers/{pager_id}").status_code == 404


def test_event_pager_with_initial_filters(
    client: TestClient, event_log: MemoryEventLog, history: History
) -> None:
    """Test event pager with initial filters."""
    event_log.extend(history("wf", "a", "ready", "started", "completed"))

    page = client.post("/api/events/pagers", json={"kind": "started"}).json()
    assert [e["kind"] for e in page["events"]] == ["started"]

    bad = client.post("/api/events/pagers", json={"kind": "exploded"})
    assert bad.status_code == 422


def test_unknown_pager_is_404(client: TestClient) -> None:
    """Test unknown pager is 404."""
    assert client.post("/api/events/pagers/nope/next").status_code == 404
    assert client.delete("/api/events/pagers/nope").status_code == 404


def test_workflows(
    client: TestClient,
    event_log: MemoryEventLog,
    program_store: MemoryProgramStore,
    history: History,
) -> None:
    """Test workflows."""
    program_store.put("wf-1", sequence([run("Mod.A", {}, "a"), run("Mod.B", {}, "b")]))
    event_log.extend(history("wf-1", "a", "ready", "started", "failed", "ready", "started"))
    event_log.extend(history("wf-2", "x", "ready", "started", "completed"))

    listed = client.get("/api/workflows").json()
    assert listed == [
        {"workflow_id": "wf-1", "status": "failed"},
        {"workflow_id": "wf-2", "status": "completed"},
    ]

    # The retry is under way, but a failure without a completion still reads as failed.
    detail = client.get("/api/workflows/wf-1").json()
    assert detail["status"] == "failed"
    assert detail["task_count"] == 1
    assert detail["event_count"] == 5
    assert detail["unstarted_task_ids"] == ["b"]
    assert detail["tasks"][0]["module"] == "MyApp.Task"
    assert [e["kind"] for e in detail["tasks"][0]["events"]] == [
        "ready",
        "started",
        "failed",
        "ready",
        "started",
    ]
    assert detail["dag"] == {
        "kind": "sequence",
        "children": [
            {"kind": "task", "task_id": "a", "module": "Mod.A"},
            {"kind": "task", "task_id": "b", "module": "Mod.B"},
        ],
    }

    # Events but no program: structure is null, the trace is still served.
    assert client.get("/api/workflows/wf-2").json()["dag"] is None
    assert client.get("/api/workflows/wf-missing").status_code == 404


def test_programs(client: TestClient, program_store: MemoryProgramStore) -> None:
    """Test programs."""
    program_store.put("wf-b", run("M", {}, "b"))
    program_store.put("wf-a", run("M", {}, "a"))

    assert client.get("/api/programs").json() == ["wf-a", "wf-b"]
    assert client.get("/api/programs/wf-a/dag").json() == {
        "workflow_id": "wf-a",
        "dag": {"kind": "task", "task_id": "a", "module": "M"},
    }
    assert client.get("/api/programs/wf-zzz/dag").json() == {"workflow_id": "wf-zzz", "dag": None}


def test_schedulers(client: TestClient, schedulers: MemorySchedulerRegistry) -> None:
    """Test schedulers."""
    schedulers.register("sched-1", handle="<pid 1>", state={"level": 1})
    schedulers.register("sched-2", handle="<pid 2>")

    listed = client.get("/api/schedulers").json()
    assert listed == [
        {
            "scheduler_id": "sched-1",
            "handle": "'<pid 1>'",
            "available": True,
            "state": "{'level': 1}",
        },
        {"scheduler_id": "sched-2", "handle": "'<pid 2>'", "available": False, "state": None},
    ]


def test_views_stay_up_when_backends_are_down(broken_inspector: Inspector) -> None:
    """Test views stay up when backends are down."""
    client = TestClient(create_app(broken_inspector))

    assert client.get("/api/overview").json()["total_events"] == 0
    assert client.get("/api/events").json() == []
    assert client.get("/api/workflows").json() == []
    assert client.get("/api/programs").json() == []
    assert client.get("/api/programs/wf/dag").json()["dag"] is None
    assert client.get("/api/schedulers").json() == []
    page = client.post("/api/events/pagers").json()
    assert page["events"] == []
    assert page["has_next"] is False


def test_default_app_with_demo_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test default app with demo seed."""
    monkeypatch.setenv("STC_INSPECTOR_SEED_DEMO", "true")
    client = TestClient(create_app())

    statuses = sorted(w["status"] for w in client.get("/api/workflows").json())
    assert statuses == ["completed", "completed", "completed", "running"]
    assert len(client.get("/api/programs").json()) == 4


def test_default_app_without_seed_is_empty() -> None:
    """Test default app without seed is empty."""
    client = TestClient(create_app())
    assert client.get("/api/workflows").json() == []


def test_seeded_inspector_through_api(
    inspector: Inspector, event_log: MemoryEventLog, program_store: MemoryProgramStore
) -> None:
    """Test seeded inspector through api."""
    ids = seed_demo(event_log, program_store, now=datetime(2025, 1, 1, tzinfo=UTC))
    client = TestClient(create_app(inspector))

    retry = client.get(f"/api/workflows/{ids[3]}").json()
    assert retry["status"] == "completed"
    upload = retry["tasks"][1]
    assert [e["kind"] for e in upload["events"]] == [
        "ready",
        "started",
        "failed",
        "ready",
        "started",
        "completed",
    ]
    assert upload["events"][2]["detail"] == "attempt=1 retriable=true reason='connection_timeout'"
