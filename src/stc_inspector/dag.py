"""Derive a renderable tree from a stored program without executing it.

Continuations are resumed with an inert placeholder instead of a real task
result. That is enough to discover straight-line structure; a continuation
that actually inspects its input may blow up, in which case the branch simply
ends there.

Node shapes (see ``to_json``)::

    {"kind": "task", "task_id": ..., "module": ...}
    {"kind": "sequence", "children": [...]}
    {"kind": "parallel", "children": [...]}
    {"kind": "unfold", "inner": node | None}
    {"kind": "unknown"}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from stc_inspector.program import Done, Parallel, Run, Sequence, Unfold

logger = logging.getLogger(__name__)

PLACEHOLDER: None = None
DEFAULT_MAX_DEPTH = 30


@dataclass(frozen=True, slots=True)
class TaskNode:
    task_id: str
    module: str

    def to_json(self) -> dict[str, object]:
        return {"kind": "task", "task_id": self.task_id, "module": self.module}


@dataclass(frozen=True, slots=True)
class SequenceNode:
    children: tuple[ProgramNode, ...]

    def to_json(self) -> dict[str, object]:
        return {"kind": "sequence", "children": [c.to_json() for c in self.children]}


@dataclass(frozen=True, slots=True)
class ParallelNode:
    children: tuple[ProgramNode, ...]

    def to_json(self) -> dict[str, object]:
        return {"kind": "parallel", "children": [c.to_json() for c in self.children]}


@dataclass(frozen=True, slots=True)
class UnfoldNode:
    inner: ProgramNode | None

    def to_json(self) -> dict[str, object]:
        return {"kind": "unfold", "inner": self.inner.to_json() if self.inner else None}


@dataclass(frozen=True, slots=True)
class UnknownNode:
    def to_json(self) -> dict[str, object]:
        return {"kind": "unknown"}


ProgramNode = TaskNode | SequenceNode | ParallelNode | UnfoldNode | UnknownNode


def walk(program: object, max_depth: int = DEFAULT_MAX_DEPTH) -> ProgramNode | None:
    """Walk ``program`` into a tree of at most ``max_depth`` levels.

    Returns ``None`` when there is nothing to render (a finished program).
    Never raises: a branch nested deeper than the interpreter stack allows
    renders as an unknown node, whatever ``max_depth`` says.
    """

    if max_depth <= 0:
        return UnknownNode()

    if isinstance(program, Done):
        return None

    if isinstance(program, Run):
        node: ProgramNode = TaskNode(task_id=program.task_id, module=program.module)
        rest = _resume(program, PLACEHOLDER, max_depth - 1)
        return _splice(node, rest)

    if isinstance(program, Sequence | Parallel):
        children = tuple(
            child
            for child in (_walk_nested(p, max_depth - 1) for p in program.programs)
            if child is not None
        )
        node = SequenceNode(children) if isinstance(program, Sequence) else ParallelNode(children)
        # Sequence/parallel results are positional, one per member program.
        rest = _resume(program, [PLACEHOLDER] * len(program.programs), max_depth - 1)
        return _splice(node, rest)

    if isinstance(program, Unfold):
        # One iteration only; the number of repetitions is not knowable here.
        return UnfoldNode(_walk_nested(program.current_step, max_depth - 1))

    return UnknownNode()


def _walk_nested(program: object, depth: int) -> ProgramNode | None:
    try:
        return walk(program, depth)
    except RecursionError:
        return UnknownNode()


def _resume(program: Run | Sequence | Parallel, value: object, depth: int) -> ProgramNode | None:
    try:
        following = program.cont(value)
    except Exception:
        logger.debug(
            "Continuation rejected placeholder; ending branch",
            extra={"operation": type(program).__name__},
            exc_info=True,
        )
        return None
    return _walk_nested(following, depth)


def _splice(node: ProgramNode, rest: ProgramNode | None) -> ProgramNode:
    # Straight-line code should read as one flat sequence, not a staircase.
    if rest is None:
        return node
    if isinstance(node, SequenceNode) and isinstance(rest, SequenceNode):
        return SequenceNode(node.children + rest.children)
    return SequenceNode((node, rest))


def iter_task_ids(node: ProgramNode | None) -> list[str]:
    """Task ids in display order (depth first)."""

    if node is None:
        return []
    if isinstance(node, TaskNode):
        return [node.task_id]
    if isinstance(node, SequenceNode | ParallelNode):
        out: list[str] = []
        for child in node.children:
            out.extend(iter_task_ids(child))
        return out
    if isinstance(node, UnfoldNode):
        return iter_task_ids(node.inner)
    return []
