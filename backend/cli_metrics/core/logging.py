import logging
import sys

_handler: logging.Handler | None = None


def configure_logging(level: str = 'INFO') -> None:
    """Send every logger to one stdout handler; repeated calls replace it."""
    global _handler

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(
        logging.Formatter(
            fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
            datefmt='%Y-%m-%dT%H:%M:%S%z',
        )
    )
    root.addHandler(_handler)
    root.setLevel(level.upper())
