"""Program values as stored by the STC engine.

A program is either finished (``Done``) or one operation plus a continuation
that produces the rest of the program from the operation's result. Nothing
past an operation exists until its continuation is called, which is what
makes the structure lazily unfolding.

The builders at the bottom mirror the engine's DSL and are used by the demo
seeds and the tests.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence as SequenceABC
from dataclasses import dataclass

Continuation = Callable[[object], "Program"]


@dataclass(frozen=True, slots=True)
class Done:
    value: object = None


@dataclass(frozen=True, slots=True)
class Run:
    task_id: str
    module: str
    payload: object
    cont: Continuation


@dataclass(frozen=True, slots=True)
class Sequence:
    programs: tuple[Program, ...]
    cont: Continuation


@dataclass(frozen=True, slots=True)
class Parallel:
    programs: tuple[Program, ...]
    cont: Continuation


@dataclass(frozen=True, slots=True)
class Unfold:
    current_step: Program
    cont: Continuation


Program = Done | Run | Sequence | Parallel | Unfold
Operation = Run | Sequence | Parallel | Unfold


def pure(value: object = None) -> Done:
    return Done(value)


def run(module: str, payload: object, task_id: str) -> Run:
    return Run(task_id=task_id, module=module, payload=payload, cont=pure)


def sequence(programs: SequenceABC[Program]) -> Sequence:
    return Sequence(programs=tuple(programs), cont=pure)


def parallel(programs: SequenceABC[Program]) -> Parallel:
    return Parallel(programs=tuple(programs), cont=pure)


def unfold(step: Program, cont: Continuation | None = None) -> Unfold:
    return Unfold(current_step=step, cont=cont or pure)


def bind(program: Program, fn: Continuation) -> Program:
    """Run ``program`` then feed its final value to ``fn``."""

    if isinstance(program, Done):
        return fn(program.value)

    inner = program.cont

    def _next(result: object) -> Program:
        return bind(inner(result), fn)

    if isinstance(program, Run):
        return Run(
            task_id=program.task_id, module=program.module, payload=program.payload, cont=_next
        )
    if isinstance(program, Sequence):
        return Sequence(programs=program.programs, cont=_next)
    if isinstance(program, Parallel):
        return Parallel(programs=program.programs, cont=_next)
    return Unfold(current_step=program.current_step, cont=_next)


def then(first: Program, second: Program) -> Program:
    """Sequential composition that discards the first result."""

    return bind(first, lambda _result: second)
