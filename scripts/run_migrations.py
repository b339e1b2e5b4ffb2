#!/usr/bin/env python3
"""Apply the invitation engine schema with Logfire error tracking.

Usage:
    DATABASE__URL=postgresql+asyncpg://... python scripts/run_migrations.py [revision]
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from lengleng.config import Settings
from lengleng.util.logging import get_logger, setup_logging
from lengleng.util.observability import configure_logfire

logger = get_logger(__name__)


def main(revision: str = "head") -> int:
    """Upgrade the database to ``revision`` and log any failure to Logfire."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    try:
        logger.info(f"Upgrading invitation schema to {revision}")
        with logfire.span("run_migrations", revision=revision):
            command.upgrade(Config("alembic.ini"), revision)
        logfire.info("Database migrations completed", revision=revision)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            revision=revision,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so a deploy step fails instead of running on a stale schema
        raise


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
