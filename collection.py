from lazy import build_chain
from pipeline import Pipeline, evaluate_eagerly, evaluate_lazily
from models import EvaluationStrategy, get_settings


class _ChainableCollection:
    """
    A chainable collection. Transformations are recorded in a Pipeline and
    only run when a terminal method is called. Subclasses pick the strategy.
    """
    strategy = None

    def __init__(self, source, pipeline=None):
        self._source = source
        self._pipeline = pipeline or Pipeline()

    @property
    def pipeline(self):
        return self._pipeline

    # --------- chainable operators ----------
    def filter(self, pred):
        return self._with(self._pipeline.filter(pred))

    def map(self, fn):
        return self._with(self._pipeline.map(fn))

    def flat_map(self, fn):
        return self._with(self._pipeline.flat_map(fn))

    def take(self, n):
        return self._with(self._pipeline.take(n))

    def skip(self, n):
        return self._with(self._pipeline.drop(n))

    def chunked(self, size):
        return self._with(self._pipeline.chunked(size))

    def sorted_by(self, key, descending=False):
        return self._with(self._pipeline.sorted_by(key, descending))

    # --------- terminal operations (force evaluation) ----------
    def to_list(self):
        return self._run(self._pipeline.to_list())

    def to_set(self):
        return self._run(self._pipeline.to_set())

    def count(self, pred=None):
        return self._run(self._pipeline.count(pred))

    def any(self, pred):
        """True if any element satisfies pred"""
        return self._run(self._pipeline.any(pred))

    def all(self, pred):
        """True if every element satisfies pred (vacuously true when empty)"""
        return self._run(self._pipeline.all(pred))

    def find(self, pred):
        """Return the first element that satisfies the predicate, or None"""
        return self._run(self._pipeline.find(pred))

    def first(self):
        return self._run(self._pipeline.first())

    def fold(self, initial, combine):
        return self._run(self._pipeline.fold(initial, combine))

    def reduce(self, combine):
        """Combine elements left to right; raises EmptyInputError when there are none"""
        return self._run(self._pipeline.reduce(combine))

    def sum_of(self, proj):
        return self._run(self._pipeline.sum_of(proj))

    def max_by(self, key, comparator=None):
        return self._run(self._pipeline.max_by(key, comparator))

    def min_by(self, key, comparator=None):
        return self._run(self._pipeline.min_by(key, comparator))

    def group_by(self, key):
        """Group elements by the result of key"""
        return self._run(self._pipeline.group_by(key))

    def partition(self, pred):
        return self._run(self._pipeline.partition(pred))

    def associate_by(self, key):
        return self._run(self._pipeline.associate_by(key))

    def associate_with(self, value):
        return self._run(self._pipeline.associate_with(value))

    def associate(self, fn):
        return self._run(self._pipeline.associate(fn))

    # --------- iterator protocol ----------
    def __iter__(self):
        return iter(self.to_list())

    # --------- helpers ----------
    def _with(self, pipeline):
        return type(self)(self._source, pipeline)

    def _run(self, pipeline):
        raise NotImplementedError


class LazyCollection(_ChainableCollection):
    """Evaluates by pulling one element at a time through the chain"""
    strategy = EvaluationStrategy.LAZY

    def __iter__(self):
        # streams; nothing is materialized
        _, tail = build_chain(self._source, self._pipeline.stages)
        return tail

    def _run(self, pipeline):
        return evaluate_lazily(pipeline, self._source)


class EagerCollection(_ChainableCollection):
    """Evaluates stage by stage, materializing every intermediate list"""
    strategy = EvaluationStrategy.EAGER

    def _run(self, pipeline):
        return evaluate_eagerly(pipeline, self._source)


def collection_for(source, strategy=None):
    """Return a chainable collection over source; strategy defaults to the configured one"""
    strategy = EvaluationStrategy(strategy or get_settings().default_strategy)
    if strategy is EvaluationStrategy.LAZY:
        return LazyCollection(source)
    return EagerCollection(source)
