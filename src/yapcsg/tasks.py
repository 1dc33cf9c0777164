"""Shared worker pool and dependency-ordered futures.

``TaskPool`` wraps a ``concurrent.futures.ThreadPoolExecutor``.  Work
that depends on other work is declared with :meth:`TaskPool.after`,
which schedules a task only once all of its input futures have
succeeded.  No pool thread ever blocks waiting on another task, so
pipelines of any depth run on a pool of any size.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional

from yapcsg.logging_utils import get_logger

logger = get_logger('yapcsg.tasks')

WORKERS_ENV = 'YAPCSG_WORKERS'


def _transfer(source: Future, target: Future) -> None:
    """copy the outcome of ``source`` onto ``target``"""
    exc = source.exception()
    if exc is not None:
        target.set_exception(exc)
    else:
        target.set_result(source.result())


def completed(value) -> Future:
    """return an already-resolved future holding ``value``"""
    fut: Future = Future()
    fut.set_result(value)
    return fut


class TaskPool:
    """Task-parallel scheduler over a shared thread pool."""

    def __init__(self, max_workers: Optional[int] = None,
                 executor: Optional[ThreadPoolExecutor] = None):
        if executor is not None and max_workers is not None:
            raise ValueError('pass either max_workers or executor, not both')
        self._owned = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix='yapcsg')

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        if self._owned:
            self._executor.shutdown(wait=wait)

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        return self._executor.submit(fn, *args, **kwargs)

    def after(self, fn: Callable, *deps: Future) -> Future:
        """Schedule ``fn(*results)`` once every future in ``deps`` has
        completed successfully.  If any dependency fails, the returned
        future fails with that dependency's exception and ``fn`` never
        runs."""
        result: Future = Future()
        if not deps:
            _transfer_when_done(self.submit(fn), result)
            return result

        lock = threading.Lock()
        remaining = [len(deps)]

        def _ready(_):
            with lock:
                remaining[0] -= 1
                if remaining[0]:
                    return
            for dep in deps:
                exc = dep.exception()
                if exc is not None:
                    logger.debug('dependency of %s failed: %r', getattr(fn, '__name__', fn), exc)
                    result.set_exception(exc)
                    return
            try:
                inner = self.submit(fn, *[dep.result() for dep in deps])
            except RuntimeError as exc:  # pool shut down
                result.set_exception(exc)
                return
            _transfer_when_done(inner, result)

        for dep in deps:
            dep.add_done_callback(_ready)
        return result

    def map(self, fn: Callable, items: Iterable[Any]) -> List[Any]:
        """apply ``fn`` to every item in parallel, preserving order; the
        first failure is re-raised"""
        return list(self._executor.map(fn, items))


def _transfer_when_done(source: Future, target: Future) -> None:
    source.add_done_callback(lambda f: _transfer(f, target))


_default_pool: Optional[TaskPool] = None
_default_lock = threading.Lock()


def default_pool() -> TaskPool:
    """Return the lazily created process-wide pool.  Its size comes from
    the ``YAPCSG_WORKERS`` environment variable when set."""
    global _default_pool
    with _default_lock:
        if _default_pool is None:
            workers = os.environ.get(WORKERS_ENV)
            max_workers = None
            if workers:
                try:
                    max_workers = int(workers)
                except ValueError:
                    raise ValueError('bad {} value: {!r}'.format(WORKERS_ENV, workers)) from None
                if max_workers < 1:
                    raise ValueError('bad {} value: {!r}'.format(WORKERS_ENV, workers))
            _default_pool = TaskPool(max_workers=max_workers)
            logger.debug('created default pool, max_workers=%s', max_workers)
        return _default_pool
