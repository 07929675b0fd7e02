"""
Pull-based iterators used by the lazy evaluation strategy.

A lazy chain is a stack of PullIterator objects, each wrapping its
upstream iterator and applying one stage per pull. Nothing is computed
until a consumer asks for the next element, and every request reads only
as many upstream elements as are needed to produce one result.
"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class IteratorState(str, Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class PullIterator:
    """
    Base class for a single-pass pull iterator.

    Subclasses implement _pull(), returning (True, value) when they produced
    an element and (False, None) once they are exhausted. has_next() holds at
    most one pulled element until next() hands it out.
    """

    def __init__(self):
        self.state = IteratorState.ACTIVE
        self._pending = False
        self._value = None

    def _pull(self) -> Tuple[bool, Any]:
        raise NotImplementedError

    def has_next(self) -> bool:
        if self._pending:
            return True
        if self.state is IteratorState.EXHAUSTED:
            return False
        produced, value = self._pull()
        if not produced:
            self.state = IteratorState.EXHAUSTED
            return False
        self._pending = True
        self._value = value
        return True

    def next(self):
        if not self.has_next():
            raise StopIteration
        value = self._value
        self._pending = False
        self._value = None
        return value

    # --------- iterator protocol ----------
    def __iter__(self):
        return self

    def __next__(self):
        return self.next()


class SourceIterator(PullIterator):
    """Reads elements from any Python iterable, one per pull"""

    def __init__(self, source: Iterable, trace: bool = False):
        super().__init__()
        self._it: Iterator = iter(source)
        self._trace = trace
        self.pulled = 0

    def _pull(self):
        try:
            value = next(self._it)
        except StopIteration:
            return False, None
        self.pulled += 1
        if self._trace:
            logger.debug(f"source pull #{self.pulled}: {value!r}")
        return True, value


class FilterIterator(PullIterator):
    def __init__(self, upstream: PullIterator, pred: Callable[[Any], bool]):
        super().__init__()
        self._upstream = upstream
        self._pred = pred

    def _pull(self):
        while self._upstream.has_next():
            value = self._upstream.next()
            if self._pred(value):
                return True, value
        return False, None


class MapIterator(PullIterator):
    def __init__(self, upstream: PullIterator, fn: Callable[[Any], Any]):
        super().__init__()
        self._upstream = upstream
        self._fn = fn

    def _pull(self):
        if self._upstream.has_next():
            return True, self._fn(self._upstream.next())
        return False, None


class FlatMapIterator(PullIterator):
    """Keeps only the inner iterator of the current upstream element"""

    def __init__(self, upstream: PullIterator, fn: Callable[[Any], Iterable]):
        super().__init__()
        self._upstream = upstream
        self._fn = fn
        self._inner: Optional[Iterator] = None

    def _pull(self):
        while True:
            if self._inner is not None:
                for value in self._inner:
                    return True, value
                self._inner = None
            if not self._upstream.has_next():
                return False, None
            self._inner = iter(self._fn(self._upstream.next()))


class TakeIterator(PullIterator):
    """Stops pulling upstream as soon as n elements were handed out"""

    def __init__(self, upstream: PullIterator, n: int):
        super().__init__()
        self._upstream = upstream
        self._remaining = max(0, int(n))

    def _pull(self):
        if self._remaining <= 0:
            return False, None
        if not self._upstream.has_next():
            return False, None
        self._remaining -= 1
        return True, self._upstream.next()


class DropIterator(PullIterator):
    def __init__(self, upstream: PullIterator, n: int):
        super().__init__()
        self._upstream = upstream
        self._to_skip = max(0, int(n))

    def _pull(self):
        while self._to_skip > 0 and self._upstream.has_next():
            self._upstream.next()
            self._to_skip -= 1
        if self._upstream.has_next():
            return True, self._upstream.next()
        return False, None


class ChunkedIterator(PullIterator):
    """Buffers one chunk at a time"""

    def __init__(self, upstream: PullIterator, size: int):
        super().__init__()
        size = int(size)
        if size < 1:
            raise ValueError(f"Chunk size must be >= 1, got {size}")
        self._upstream = upstream
        self._size = size

    def _pull(self):
        bucket: List[Any] = []
        while len(bucket) < self._size and self._upstream.has_next():
            bucket.append(self._upstream.next())
        if bucket:
            return True, tuple(bucket)
        return False, None


class SortedIterator(PullIterator):
    """
    Reordering stage: drains the upstream on the first pull, then hands out
    the stably sorted elements one by one.
    """

    def __init__(self, upstream: PullIterator, key: Callable[[Any], Any], descending: bool = False):
        super().__init__()
        self._upstream = upstream
        self._key = key
        self._descending = descending
        self._sorted: Optional[Iterator] = None

    def _pull(self):
        if self._sorted is None:
            self._sorted = iter(sorted(self._upstream, key=self._key, reverse=self._descending))
        for value in self._sorted:
            return True, value
        return False, None


# Stage name -> iterator class; extra stage arguments are passed through
STAGE_ITERATORS = {
    "filter": FilterIterator,
    "map": MapIterator,
    "flat_map": FlatMapIterator,
    "take": TakeIterator,
    "drop": DropIterator,
    "chunked": ChunkedIterator,
    "sorted_by": SortedIterator,
}


def build_chain(source: Iterable, stages, trace: bool = False) -> Tuple[SourceIterator, PullIterator]:
    """Wrap source in one iterator per stage. Returns (source iterator, last iterator)."""
    head = SourceIterator(source, trace=trace)
    it: PullIterator = head
    for stage in stages:
        try:
            iterator_cls = STAGE_ITERATORS[stage.op]
        except KeyError:
            raise ValueError(f"Unknown op: {stage.op}") from None
        it = iterator_cls(it, *stage.args)
    return head, it
