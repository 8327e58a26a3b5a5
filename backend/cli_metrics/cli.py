"""Process entry point: open the log store and serve the ingestion API.

    cli-metrics-server --path /var/lib/sqlite3/drud_cli_metrics.db --port 12345
"""

import argparse
import logging
import sys

import uvicorn

from cli_metrics.core.config import settings
from cli_metrics.core.logging import configure_logging
from cli_metrics.main import create_app
from cli_metrics.store import init_store

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Accept logging from the CLI tool over HTTP')
    parser.add_argument(
        '--path',
        default=settings.DB_PATH,
        help='Full path to the sqlite3 database file, created if it does not exist.',
    )
    parser.add_argument(
        '--port',
        type=int,
        default=settings.PORT,
        help='Port on which the service should listen.',
    )
    parser.add_argument('--host', default=settings.HOST)
    parser.add_argument('--log-level', default=settings.LOG_LEVEL)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    logger.info('Will listen on port=%d', args.port)
    logger.info('Sqlite DB file fullpath=%s', args.path)

    init = init_store(args.path)
    if not init.ok:
        logger.critical('Cannot start: log store at %s unavailable: %s', init.location, init.error)
        return 1

    try:
        uvicorn.run(
            create_app(init.store),
            host=args.host,
            port=args.port,
            log_config=None,
        )
    finally:
        init.store.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
