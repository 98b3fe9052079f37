#!/usr/bin/env python3
"""
Rescore job - the unit of work executed by the RQ worker or the in-process pool.

Must stay importable at module level: RQ pickles the function reference.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from core.cache import build_cache
from core.cache.views import CacheAside
from core.config_loader import AppConfig, load_config
from core.scorer.service import ScoreService
from database.uow import hr_uow
from rescore.events import TaskCompletedEvent

logger = logging.getLogger(__name__)


_context: Optional[Tuple[AppConfig, CacheAside]] = None


def configure_worker(config: AppConfig) -> None:
    """Bind the config (and a cache built from it) used by jobs that get none injected."""
    global _context
    _context = (config, CacheAside(build_cache(config.cache), config.cache))


def _worker_context() -> Tuple[AppConfig, CacheAside]:
    """Config and cache for jobs running in a standalone worker process."""
    if _context is None:
        configure_worker(load_config())
    return _context


def process_rescore_job(
    event_data: Dict[str, Any],
    config: Optional[AppConfig] = None,
    cache: Optional[CacheAside] = None
) -> str:
    """
    Recompute and persist the score for the event's employee.

    Errors propagate so RQ's Retry (or the pool's tenacity policy) applies.

    Returns:
        ID of the new score log row
    """
    event = TaskCompletedEvent.from_dict(event_data)
    if config is None or cache is None:
        worker_config, worker_cache = _worker_context()
        config = config or worker_config
        cache = cache or worker_cache

    logger.info(f"Processing rescore for employee {event.employee_id} (task {event.task_id})")

    with hr_uow() as repo:
        entry = ScoreService(repo, cache, config).recompute_and_persist(
            event.org_id,
            event.task_id,
            event.employee_id
        )
    return str(entry.id)
