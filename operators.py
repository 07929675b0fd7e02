"""
Pipeline operators: pure functions over ordered sequences.

Every operator accepts any iterable, reads it at most once from left to
right and never mutates it. Operators that return sequences return new
lists; grouping and association return new dicts whose key order is the
order in which keys were first seen.
"""

import logging
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Set, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
A = TypeVar("A")

Predicate = Callable[[T], bool]
Comparator = Callable[[Any, Any], int]


class EmptyInputError(ValueError):
    """Raised when an operation needs at least one element and got none."""
    pass


# --------- sequence -> sequence ----------

def filter_items(items: Iterable[T], pred: Predicate) -> List[T]:
    return [x for x in items if pred(x)]


def map_items(items: Iterable[T], fn: Callable[[T], U]) -> List[U]:
    return [fn(x) for x in items]


def flat_map(items: Iterable[T], fn: Callable[[T], Iterable[U]]) -> List[U]:
    """Concatenate fn(x) for every x, in order"""
    result = []
    for x in items:
        result.extend(fn(x))
    return result


def take(items: Iterable[T], n: int) -> List[T]:
    """First n elements; negative n is treated as 0"""
    n = max(0, int(n))
    result = []
    if n == 0:
        return result
    for x in items:
        result.append(x)
        if len(result) >= n:
            break
    return result


def drop(items: Iterable[T], n: int) -> List[T]:
    """Everything after the first n elements; negative n is treated as 0"""
    n = max(0, int(n))
    return [x for i, x in enumerate(items) if i >= n]


def sorted_by(items: Iterable[T], key: Callable[[T], Any], descending: bool = False) -> List[T]:
    """Stable sort by key. Elements with equal keys keep their input order."""
    return sorted(items, key=key, reverse=descending)


def chunked(items: Iterable[T], size: int) -> List[Tuple[T, ...]]:
    """Split into tuples of `size` elements; the last one may be shorter"""
    size = int(size)
    if size < 1:
        raise ValueError(f"Chunk size must be >= 1, got {size}")
    chunks = []
    bucket = []
    for x in items:
        bucket.append(x)
        if len(bucket) == size:
            chunks.append(tuple(bucket))
            bucket = []
    if bucket:
        chunks.append(tuple(bucket))
    return chunks


# --------- grouping and association ----------

def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """
    Group elements by key.

    Groups are ordered by the first occurrence of their key and every group
    keeps the encounter order of its elements.
    """
    groups: Dict[K, List[T]] = {}
    for x in items:
        groups.setdefault(key(x), []).append(x)
    return groups


def partition(items: Iterable[T], pred: Predicate) -> Tuple[List[T], List[T]]:
    """Split into (matches, non_matches), both in input order"""
    matches, non_matches = [], []
    for x in items:
        if pred(x):
            matches.append(x)
        else:
            non_matches.append(x)
    return matches, non_matches


def associate(items: Iterable[T], fn: Callable[[T], Tuple[K, V]]) -> Dict[K, V]:
    """
    Build a dict from the (key, value) pairs produced by fn.

    On a key collision the later value replaces the earlier one. This is the
    documented behavior, not an error; the key keeps its first position.
    """
    result: Dict[K, V] = {}
    for x in items:
        k, v = fn(x)
        if k in result:
            logger.debug(f"associate: key {k!r} overwritten by a later element")
        result[k] = v
    return result


def associate_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, T]:
    """Index elements by key; the last element with a given key wins"""
    return associate(items, lambda x: (key(x), x))


def associate_with(items: Iterable[K], value: Callable[[K], V]) -> Dict[K, V]:
    """Map every distinct element to value(element); a recurring element keeps the later value"""
    return associate(items, lambda x: (x, value(x)))


# --------- folding and aggregation ----------

def fold(items: Iterable[T], initial: A, combine: Callable[[A, T], A]) -> A:
    acc = initial
    for x in items:
        acc = combine(acc, x)
    return acc


def reduce_items(items: Iterable[T], combine: Callable[[T, T], T]) -> T:
    """Fold using the first element as the seed. Raises EmptyInputError on empty input."""
    it = iter(items)
    try:
        acc = next(it)
    except StopIteration:
        raise EmptyInputError("Cannot reduce an empty sequence") from None
    for x in it:
        acc = combine(acc, x)
    return acc


def sum_of(items: Iterable[T], proj: Callable[[T], float]):
    """Running sum of proj(x), added strictly left to right starting from 0"""
    total = 0
    for x in items:
        total += proj(x)
    return total


def _natural_order(a, b) -> int:
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def max_by_or_none(items: Iterable[T], key: Callable[[T], Any],
                   comparator: Optional[Comparator] = None) -> Optional[T]:
    """
    Element with the largest key, or None for empty input.

    The first of several equal maxima wins. `comparator(a, b)` returns a
    negative number, zero or a positive number and replaces the natural
    ordering of keys when given.
    """
    compare = comparator or _natural_order
    best, best_key, found = None, None, False
    for x in items:
        k = key(x)
        if not found or compare(k, best_key) > 0:
            best, best_key, found = x, k, True
    return best


def min_by_or_none(items: Iterable[T], key: Callable[[T], Any],
                   comparator: Optional[Comparator] = None) -> Optional[T]:
    """Element with the smallest key, or None; the first of equal minima wins"""
    compare = comparator or _natural_order
    best, best_key, found = None, None, False
    for x in items:
        k = key(x)
        if not found or compare(k, best_key) < 0:
            best, best_key, found = x, k, True
    return best


# --------- sets ----------

def to_list(items: Iterable[T]) -> List[T]:
    return list(items)


def to_set(items: Iterable[T]) -> Set[T]:
    return set(items)


def intersect(a: Iterable[T], b: Iterable[T]) -> Set[T]:
    return set(a) & set(b)


def intersect_all(sets: Iterable[Iterable[T]]) -> Set[T]:
    """Intersection of one or more sets, applied pairwise left to right. Zero sets raise EmptyInputError."""
    try:
        return reduce_items((set(s) for s in sets), intersect)
    except EmptyInputError:
        raise EmptyInputError("Cannot intersect zero sets") from None


# --------- queries (short-circuiting) ----------

def count(items: Iterable[T], pred: Optional[Predicate] = None) -> int:
    n = 0
    for x in items:
        if pred is None or pred(x):
            n += 1
    return n


def any_match(items: Iterable[T], pred: Predicate) -> bool:
    """True at the first element satisfying pred; nothing after it is read"""
    for x in items:
        if pred(x):
            return True
    return False


def all_match(items: Iterable[T], pred: Predicate) -> bool:
    """False at the first element failing pred; nothing after it is read"""
    for x in items:
        if not pred(x):
            return False
    return True


def find(items: Iterable[T], pred: Predicate) -> Optional[T]:
    """First element satisfying pred, or None"""
    for x in items:
        if pred(x):
            return x
    return None


def first_or_none(items: Iterable[T]) -> Optional[T]:
    for x in items:
        return x
    return None
