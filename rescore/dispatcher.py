#!/usr/bin/env python3
"""
Rescore Dispatcher - hands task-completion events to an out-of-band executor.

on_task_completed() returns as soon as the job is queued. Two backends:

- RQ queue (use_async_queue=True): consumed by `python -m rescore.worker`,
  retried by RQ with the configured intervals.
- Bounded in-process ThreadPoolExecutor: used when the queue is disabled or
  Redis is unreachable at startup; retries with tenacity.

Each task is dispatched at most once per dedup TTL: a Redis SET NX marker
when Redis is connected, an in-process expiring map otherwise. A claim is
released again when the dispatch itself fails.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

from redis import Redis, RedisError
from rq import Queue, Retry
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_chain,
    wait_fixed
)

from core.cache.views import CacheAside
from core.config_loader import AppConfig
from core.errors import ServiceException
from rescore.events import TaskCompletedEvent
from rescore.tasks import process_rescore_job

logger = logging.getLogger(__name__)


def _is_retryable_error(exception: BaseException) -> bool:
    """Service errors declare it; anything else from the store is treated as transient."""
    if isinstance(exception, ServiceException):
        return exception.retryable
    return True


class RescoreDispatcher:
    DEDUP_PREFIX = "rescore:task:"

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        cache: Optional[CacheAside] = None,
        redis_conn: Optional[Redis] = None
    ):
        """
        Args:
            config: Application config; the rescore section drives the backend
            cache: Cache handed to in-process jobs (RQ workers build their own)
            redis_conn: Pre-built connection, mainly for tests
        """
        self.config = config or AppConfig()
        self.policy = self.config.rescore
        self.cache = cache
        self.redis_conn = None
        self.queue = None
        self.async_mode = False
        self._executor: Optional[ThreadPoolExecutor] = None
        self._seen: Dict[str, float] = {}
        self._lock = threading.Lock()

        redis_url = self.policy.redis_url or self.config.cache.redis_url

        if not self.policy.use_async_queue:
            logger.info("Async rescore queue disabled via config. Using in-process pool.")
        else:
            try:
                self.redis_conn = redis_conn or Redis.from_url(redis_url)
                # Validate connection with ping before using
                self.redis_conn.ping()
                self.queue = Queue(self.policy.queue_name, connection=self.redis_conn)
                self.async_mode = True
                logger.info(f"Rescore dispatcher connected to queue '{self.policy.queue_name}'")
            except RedisError as e:
                logger.error(f"Redis connection failed: {e}. Falling back to in-process pool.")
                self.redis_conn = None
                self.queue = None

    def on_task_completed(self, event: TaskCompletedEvent) -> bool:
        """
        Queue a rescore for the event and return immediately.

        Never raises: a lost dispatch is logged and the next completion for
        the employee (or the cache TTL) catches up.

        Returns:
            True if a job was queued, False if suppressed or not queued
        """
        if not self._claim(event.task_id):
            logger.info(f"Suppressing duplicate rescore for task {event.task_id}")
            return False

        try:
            if self.async_mode:
                job = self.queue.enqueue(
                    process_rescore_job,
                    event.to_dict(),
                    job_timeout=self.policy.job_timeout,
                    result_ttl=self.policy.result_ttl_seconds,
                    retry=Retry(max=self.policy.max_retries, interval=self.policy.retry_intervals)
                )
                logger.info(f"Queued rescore for employee {event.employee_id} as job {job.id}")
            else:
                self._pool().submit(self._run_in_process, event)
                logger.info(f"Submitted in-process rescore for employee {event.employee_id}")
            return True
        except (RedisError, RuntimeError) as e:
            logger.error(f"Failed to dispatch rescore for task {event.task_id}: {e}")
            self._release(event.task_id)
            return False

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def _claim(self, task_id: str) -> bool:
        """First caller for a task wins."""
        if self.redis_conn is not None:
            key = f"{self.DEDUP_PREFIX}{task_id}"
            try:
                return bool(self.redis_conn.set(key, "1", nx=True, ex=self.policy.dedup_ttl_seconds))
            except RedisError as e:
                logger.warning(f"Dedup marker unavailable, using in-process map: {e}")

        now = time.monotonic()
        with self._lock:
            expired = [k for k, expiry in self._seen.items() if expiry <= now]
            for k in expired:
                del self._seen[k]
            if task_id in self._seen:
                return False
            self._seen[task_id] = now + self.policy.dedup_ttl_seconds
            return True

    def _release(self, task_id: str) -> None:
        """Drop a claim so a later completion for the task can dispatch."""
        if self.redis_conn is not None:
            try:
                self.redis_conn.delete(f"{self.DEDUP_PREFIX}{task_id}")
            except RedisError as e:
                logger.warning(f"Could not release dedup marker for task {task_id}: {e}")

        with self._lock:
            self._seen.pop(task_id, None)

    def _pool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.policy.pool_workers,
                    thread_name_prefix="rescore"
                )
            return self._executor

    def _run_in_process(self, event: TaskCompletedEvent) -> Optional[str]:
        intervals = self.policy.retry_intervals or [0]
        retryer = Retrying(
            stop=stop_after_attempt(self.policy.max_retries + 1),
            wait=wait_chain(*[wait_fixed(i) for i in intervals]),
            retry=retry_if_exception(_is_retryable_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        try:
            return retryer(process_rescore_job, event.to_dict(), config=self.config, cache=self.cache)
        except Exception as e:
            # Pool boundary: nothing upstream is waiting on this future
            logger.error(
                f"Rescore failed for employee {event.employee_id} (task {event.task_id}): {e}",
                exc_info=True
            )
            return None
