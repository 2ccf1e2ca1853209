"""Concurrent fan-out of independent mutations (one task per target)."""
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from .mutator import ResourceMutator

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    succeeded: List[Tuple[Any, Optional[Dict[str, Any]]]] = field(default_factory=list)
    failed: List[Tuple[Any, BaseException]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def create_for_each(mutator: ResourceMutator, credential: str, targets: Iterable[Any],
                    build: Callable[[Any], Tuple[str, Any]], max_workers: int = 4,
                    timeout: Optional[float] = None) -> BatchResult:
    """POST one payload per target; failures are collected, never propagated.

    ``build(target)`` returns ``(endpoint, payload)``. Results are appended in
    completion order. ``timeout`` bounds the whole wait; targets still pending
    when it expires are reported as failed with a TimeoutError.
    """
    result = BatchResult()
    executor = ThreadPoolExecutor(max_workers=max_workers)
    futures = {}
    pending = set()

    def _record(fut):
        target = futures[fut]
        pending.discard(fut)
        try:
            result.succeeded.append((target, fut.result()))
        except Exception as e:
            logger.warning('Mutation for %r failed: %s', target, e)
            result.failed.append((target, e))

    try:
        for target in targets:
            try:
                endpoint, payload = build(target)
            except Exception as e:
                logger.warning('Could not build request for %r: %s', target, e)
                result.failed.append((target, e))
                continue
            fut = executor.submit(mutator.create_resource, credential, endpoint, payload)
            futures[fut] = target
            pending.add(fut)
        try:
            for fut in as_completed(futures, timeout=timeout):
                _record(fut)
        except FuturesTimeout:
            for fut in list(pending):
                if fut.done():
                    _record(fut)
                else:
                    fut.cancel()
                    pending.discard(fut)
                    target = futures[fut]
                    result.failed.append((target, TimeoutError(f"No result for {target!r} within {timeout}s")))
    finally:
        executor.shutdown(wait=False)
    logger.info('Batch finished: %d succeeded, %d failed', len(result.succeeded), len(result.failed))
    return result
