"""
Chain descriptions and the two evaluation strategies.

A Pipeline is an immutable list of intermediate stages plus an optional
terminal operation. The same Pipeline can be run eagerly (every stage
materializes a full list before the next one starts) or lazily (a single
pull-based pass through a chain of iterators) and both give the same result.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple

import operators
from lazy import build_chain
from models import EvaluationStrategy, QuerySettings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    """One intermediate step, e.g. Stage("map", (fn,))"""
    op: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Terminal:
    """The operation consuming the final stream, e.g. Terminal("count", (pred,))"""
    op: str
    args: Tuple[Any, ...] = ()


# Stage name -> list-returning operator used by the eager strategy
EAGER_STAGES = {
    "filter": operators.filter_items,
    "map": operators.map_items,
    "flat_map": operators.flat_map,
    "take": operators.take,
    "drop": operators.drop,
    "chunked": operators.chunked,
    "sorted_by": operators.sorted_by,
}

# Terminal name -> operator; each reads its input once, left to right
TERMINALS = {
    "to_list": operators.to_list,
    "to_set": operators.to_set,
    "count": operators.count,
    "any": operators.any_match,
    "all": operators.all_match,
    "find": operators.find,
    "first": operators.first_or_none,
    "fold": operators.fold,
    "reduce": operators.reduce_items,
    "sum_of": operators.sum_of,
    "max_by": operators.max_by_or_none,
    "min_by": operators.min_by_or_none,
    "group_by": operators.group_by,
    "partition": operators.partition,
    "associate_by": operators.associate_by,
    "associate_with": operators.associate_with,
    "associate": operators.associate,
}


class Pipeline:
    """
    Immutable chain description.

    Builder methods return a new Pipeline. Once a terminal is set the chain
    is closed: adding a stage or a second terminal raises ValueError.
    """

    def __init__(self, stages: Tuple[Stage, ...] = (), terminal: Optional[Terminal] = None):
        self.stages = tuple(stages)
        self.terminal = terminal

    def __repr__(self):
        ops = [s.op for s in self.stages]
        if self.terminal is not None:
            ops.append(self.terminal.op)
        return f"Pipeline({' -> '.join(ops) or 'identity'})"

    # --------- intermediate stages ----------
    def filter(self, pred: Callable[[Any], bool]) -> "Pipeline":
        return self._with_stage(Stage("filter", (pred,)))

    def map(self, fn: Callable[[Any], Any]) -> "Pipeline":
        return self._with_stage(Stage("map", (fn,)))

    def flat_map(self, fn: Callable[[Any], Iterable]) -> "Pipeline":
        return self._with_stage(Stage("flat_map", (fn,)))

    def take(self, n: int) -> "Pipeline":
        return self._with_stage(Stage("take", (int(n),)))

    def drop(self, n: int) -> "Pipeline":
        return self._with_stage(Stage("drop", (int(n),)))

    def chunked(self, size: int) -> "Pipeline":
        if int(size) < 1:
            raise ValueError(f"Chunk size must be >= 1, got {size}")
        return self._with_stage(Stage("chunked", (int(size),)))

    def sorted_by(self, key: Callable[[Any], Any], descending: bool = False) -> "Pipeline":
        return self._with_stage(Stage("sorted_by", (key, descending)))

    # --------- terminals ----------
    def to_list(self) -> "Pipeline":
        return self._with_terminal(Terminal("to_list"))

    def to_set(self) -> "Pipeline":
        return self._with_terminal(Terminal("to_set"))

    def count(self, pred: Optional[Callable[[Any], bool]] = None) -> "Pipeline":
        return self._with_terminal(Terminal("count", (pred,)))

    def any(self, pred: Callable[[Any], bool]) -> "Pipeline":
        return self._with_terminal(Terminal("any", (pred,)))

    def all(self, pred: Callable[[Any], bool]) -> "Pipeline":
        return self._with_terminal(Terminal("all", (pred,)))

    def find(self, pred: Callable[[Any], bool]) -> "Pipeline":
        return self._with_terminal(Terminal("find", (pred,)))

    def first(self) -> "Pipeline":
        return self._with_terminal(Terminal("first"))

    def fold(self, initial: Any, combine: Callable[[Any, Any], Any]) -> "Pipeline":
        return self._with_terminal(Terminal("fold", (initial, combine)))

    def reduce(self, combine: Callable[[Any, Any], Any]) -> "Pipeline":
        return self._with_terminal(Terminal("reduce", (combine,)))

    def sum_of(self, proj: Callable[[Any], float]) -> "Pipeline":
        return self._with_terminal(Terminal("sum_of", (proj,)))

    def max_by(self, key: Callable[[Any], Any], comparator=None) -> "Pipeline":
        return self._with_terminal(Terminal("max_by", (key, comparator)))

    def min_by(self, key: Callable[[Any], Any], comparator=None) -> "Pipeline":
        return self._with_terminal(Terminal("min_by", (key, comparator)))

    def group_by(self, key: Callable[[Any], Any]) -> "Pipeline":
        return self._with_terminal(Terminal("group_by", (key,)))

    def partition(self, pred: Callable[[Any], bool]) -> "Pipeline":
        return self._with_terminal(Terminal("partition", (pred,)))

    def associate_by(self, key: Callable[[Any], Any]) -> "Pipeline":
        return self._with_terminal(Terminal("associate_by", (key,)))

    def associate_with(self, value: Callable[[Any], Any]) -> "Pipeline":
        return self._with_terminal(Terminal("associate_with", (value,)))

    def associate(self, fn: Callable[[Any], Tuple[Any, Any]]) -> "Pipeline":
        return self._with_terminal(Terminal("associate", (fn,)))

    # --------- helpers ----------
    def _with_stage(self, stage: Stage) -> "Pipeline":
        if self.terminal is not None:
            raise ValueError(f"Cannot add stage '{stage.op}' after terminal '{self.terminal.op}'")
        if stage.op not in EAGER_STAGES:
            raise ValueError(f"Unknown op: {stage.op}")
        return Pipeline(self.stages + (stage,), None)

    def _with_terminal(self, terminal: Terminal) -> "Pipeline":
        if self.terminal is not None:
            raise ValueError(f"Pipeline already ends with terminal '{self.terminal.op}'")
        if terminal.op not in TERMINALS:
            raise ValueError(f"Unknown terminal: {terminal.op}")
        return Pipeline(self.stages, terminal)


def _apply_terminal(terminal: Optional[Terminal], items: Iterable):
    if terminal is None:
        return list(items)
    return TERMINALS[terminal.op](items, *terminal.args)


def evaluate_eagerly(pipeline: Pipeline, source: Iterable):
    """Run every stage to completion, materializing each intermediate list"""
    items = list(source)
    logger.debug(f"eager: {pipeline!r} over {len(items)} elements")
    for stage in pipeline.stages:
        try:
            step = EAGER_STAGES[stage.op]
        except KeyError:
            raise ValueError(f"Unknown op: {stage.op}") from None
        items = step(items, *stage.args)
    return _apply_terminal(pipeline.terminal, items)


def evaluate_lazily(pipeline: Pipeline, source: Iterable, trace: Optional[bool] = None):
    """
    Pull elements through a chain of iterators, one at a time.

    The terminal decides how far the source is read: short-circuiting
    terminals (any, all, find, first) stop pulling once the answer is known.
    """
    if trace is None:
        trace = get_settings().trace_pulls
    head, tail = build_chain(source, pipeline.stages, trace=trace)
    result = _apply_terminal(pipeline.terminal, tail)
    logger.debug(f"lazy: {pipeline!r} pulled {head.pulled} source elements")
    return result


def evaluate(pipeline: Pipeline, source: Iterable,
             strategy: Optional[EvaluationStrategy] = None,
             settings: Optional[QuerySettings] = None):
    """Evaluate with the given strategy, or the configured default"""
    settings = settings or get_settings()
    strategy = EvaluationStrategy(strategy or settings.default_strategy)
    if strategy is EvaluationStrategy.LAZY:
        return evaluate_lazily(pipeline, source, trace=settings.trace_pulls)
    return evaluate_eagerly(pipeline, source)
