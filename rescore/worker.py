#!/usr/bin/env python3
"""
RQ Worker for the rescore queue.

Consumes jobs queued by RescoreDispatcher and runs
rescore.tasks.process_rescore_job for each.

Usage:
    python -m rescore.worker
    python -m rescore.worker --burst
    python -m rescore.worker --verbose
"""

import sys
import argparse
import logging
from typing import List, Optional

from redis import Redis, RedisError
from rq import Worker

from core.config_loader import load_config
from database.database import configure_engine
from rescore.tasks import configure_worker

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def start_worker(burst: bool = False, queues: Optional[List[str]] = None, config_path: str = "config.yaml"):
    """Start the RQ worker."""
    config = load_config(config_path)
    redis_url = config.rescore.redis_url or config.cache.redis_url

    if queues is None:
        queues = [config.rescore.queue_name]

    configure_engine(
        config.database.url,
        pool_timeout_seconds=config.database.pool_timeout_seconds,
        statement_timeout_ms=config.database.statement_timeout_ms
    )
    configure_worker(config)

    logger.info("Starting rescore worker")
    logger.info(f"Queues: {', '.join(queues)}")
    logger.info(f"Burst mode: {burst}")

    try:
        redis_conn = Redis.from_url(redis_url)
        redis_conn.ping()
        logger.info("Connected to Redis")

        worker = Worker(queues, connection=redis_conn)

        if burst:
            logger.info("Running in burst mode...")
            worker.work(burst=True)
        else:
            logger.info("Worker started. Press Ctrl+C to stop.")
            worker.work()

    except KeyboardInterrupt:
        logger.info("Worker stopped")
    except RedisError as e:
        logger.error(f"Redis error: {e}")
        sys.exit(1)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description='HRMS Rescore Worker')
    parser.add_argument('--burst', action='store_true', help='Process all and exit')
    parser.add_argument('--queues', nargs='+', default=None)
    parser.add_argument('--config', default='config.yaml')
    parser.add_argument('--verbose', action='store_true')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    start_worker(burst=args.burst, queues=args.queues, config_path=args.config)


if __name__ == '__main__':
    main()
