"""
Utility functions for the shop collections library.

Logging setup, traversal counting and helpers for measuring and comparing
the eager and lazy strategies.
"""

import sys
import time
import gc
import logging
import tracemalloc
from typing import Any, Dict, Iterable, Optional

from models import QuerySettings, StrategyComparison, get_settings
from pipeline import Pipeline, evaluate_eagerly, evaluate_lazily


def setup_logging(settings: Optional[QuerySettings] = None) -> logging.Logger:
    """Configure root logging from the settings and return the root logger"""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger()


logger = logging.getLogger(__name__)


class CountingSource:
    """Re-iterable wrapper counting how many elements were read from the source"""

    def __init__(self, source: Iterable):
        self._source = source
        self.pulled = 0

    def __iter__(self):
        for item in self._source:
            self.pulled += 1
            yield item

    def reset(self):
        self.pulled = 0


def measure_performance(operation_name: str, func, *args, **kwargs) -> Dict[str, Any]:
    """Measure time and peak memory of a function call"""
    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()

        return {
            "operation": operation_name,
            "result": result,
            "execution_time_ms": execution_time_ms,
            "memory_usage_mb": peak / 1024 / 1024,
            "success": True,
        }
    except Exception:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"{operation_name} failed after {execution_time_ms:.2f} ms")
        raise
    finally:
        tracemalloc.stop()


def compare_strategies(pipeline: Pipeline, source: Iterable) -> StrategyComparison:
    """
    Run the same pipeline eagerly and lazily over a re-iterable source.

    Errors raised by either strategy propagate to the caller.
    """
    counting = CountingSource(source)

    start = time.perf_counter()
    eager_result = evaluate_eagerly(pipeline, counting)
    eager_ms = (time.perf_counter() - start) * 1000
    eager_pulls = counting.pulled

    counting.reset()
    start = time.perf_counter()
    lazy_result = evaluate_lazily(pipeline, counting)
    lazy_ms = (time.perf_counter() - start) * 1000
    lazy_pulls = counting.pulled

    comparison = StrategyComparison(
        eager_result=eager_result,
        lazy_result=lazy_result,
        eager_pulls=eager_pulls,
        lazy_pulls=lazy_pulls,
        equivalent=eager_result == lazy_result,
        stage_count=len(pipeline.stages),
        terminal=pipeline.terminal.op if pipeline.terminal else None,
        timings_ms={"eager": eager_ms, "lazy": lazy_ms},
    )
    logger.info(
        f"{pipeline!r}: eager read {eager_pulls}, lazy read {lazy_pulls} "
        f"(equivalent={comparison.equivalent})"
    )
    return comparison
