# src/scheduled_tasks/cli/main.py

"""
CLI entrypoint.

Loads settings, initializes logging and Sentry, connects to the databases,
waits for the next round minute and then runs every scheduler until the
process is killed. Any failure before scheduling starts exits with status 1.
"""

from __future__ import annotations

import logging
import sys

import psycopg
import redis

from ..cli.bootstrap import connect_dependencies
from ..config import ConfigError, get_settings
from ..logging_setup import level_from_name, setup_logging
from ..reporting.sentry import SentryErrorTracker, init_sentry
from ..scheduler.alignment import wait_until_next_minute
from ..scheduler.runner import run_schedulers
from ..stats.tasks import build_tasks

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = get_settings()
    except ConfigError as exc:
        setup_logging()
        logger.critical("invalid configuration: %s", exc)
        return 1

    setup_logging(log_dir=settings.log_dir, console_level=level_from_name(settings.log_level))
    logger.info("Starting %s...", settings.app_name)

    init_sentry(settings)
    tracker = SentryErrorTracker()

    logger.info("connecting to databases")
    try:
        deps = connect_dependencies(settings)
    except (psycopg.Error, redis.RedisError):
        logger.critical("could not connect to databases", exc_info=True)
        return 1

    try:
        logger.info("starting scheduled tasks runner")
        wait_until_next_minute()
        run_schedulers(build_tasks(deps), tracker)
    finally:
        deps.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
