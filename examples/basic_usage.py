#!/usr/bin/env python3
"""Programmatic inspection example.

This demonstrates using the inspector components directly:

* load settings from `.env`
* seed in-memory stores with the demo workflows
* print workflow statuses, one program structure, and the first event page

Point `Inspector` at real backends instead of the memory ones to inspect a
running engine.
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from stc_inspector.backends.memory import MemoryEventLog, MemoryProgramStore
from stc_inspector.classifier import event_detail, event_kind, short_id
from stc_inspector.config import InspectorSettings
from stc_inspector.inspector import Inspector
from stc_inspector.logging import configure_logging
from stc_inspector.seeds import seed_demo


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect seeded demo workflows.")
    parser.add_argument(
        "--workflow",
        default="",
        help="Workflow id whose program structure to print (defaults to the parallel demo)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = InspectorSettings()
    configure_logging(settings.log_level)

    event_log = MemoryEventLog()
    program_store = MemoryProgramStore()
    workflow_ids = seed_demo(event_log, program_store)

    inspector = Inspector(event_log, program_store, settings=settings)

    for workflow_id, status in inspector.workflow_summaries():
        print(f"{workflow_id:<20} {status.value}")

    target = args.workflow or workflow_ids[1]
    dag = inspector.build_program_dag(target)
    print(json.dumps(dag.to_json() if dag else None, indent=2))

    pager = inspector.pager()
    for event in pager.events:
        print(
            f"{event_kind(event):<10} {short_id(event.workflow_id):<12} "
            f"{short_id(event.task_id):<12} {event_detail(event)}"
        )
    if pager.has_next:
        print(f"... more events after page {pager.page}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
