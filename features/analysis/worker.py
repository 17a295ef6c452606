"""
Background execution of scoring jobs.

``start`` hands the analysis id to the shared ``ScoringQueue``; a pool thread
runs the job and drives the analysis to ``completed`` or ``failed``. With
``ANALYSIS_QUEUE_EAGER`` the job runs inline at enqueue time instead.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.db import close_old_connections, transaction

logger = logging.getLogger(__name__)


def call_with_timeout(fn, timeout, *args, **kwargs):
    """
    Run ``fn`` on a helper thread and wait at most ``timeout`` seconds.

    Raises ``concurrent.futures.TimeoutError`` when the deadline passes. The
    helper thread is not interrupted; its late result is discarded.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="vastu-score")
    try:
        future = executor.submit(fn, *args, **kwargs)
        return future.result(timeout=timeout)
    finally:
        executor.shutdown(wait=False)


class ScoringQueue:
    def __init__(self, max_workers=None, eager=None):
        self.eager = settings.ANALYSIS_QUEUE_EAGER if eager is None else eager
        self.max_workers = max_workers or settings.ANALYSIS_WORKER_THREADS
        self._executor = None
        self._lock = threading.Lock()

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="vastu-worker"
                )
            return self._executor

    def enqueue(self, job, *args):
        """Schedule ``job(*args)`` once the current transaction commits."""
        if self.eager:
            logger.debug("Running %s%r inline", job.__name__, args)
            job(*args)
            return None
        transaction.on_commit(lambda: self.executor.submit(self._run, job, *args))
        return None

    def _run(self, job, *args):
        close_old_connections()
        try:
            job(*args)
        except Exception:
            logger.exception("Scoring job %s%r crashed", job.__name__, args)
        finally:
            close_old_connections()

    def shutdown(self, wait=True):
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None


_queue = None
_queue_lock = threading.Lock()


def get_scoring_queue() -> ScoringQueue:
    global _queue
    with _queue_lock:
        if _queue is None:
            _queue = ScoringQueue()
        return _queue


def reset_scoring_queue():
    """Drop the shared queue so the next call re-reads settings."""
    global _queue
    with _queue_lock:
        if _queue is not None:
            _queue.shutdown(wait=False)
        _queue = None
