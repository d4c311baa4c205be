"""structlog setup for applications embedding the hex map core."""

import logging

import structlog


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog with console output filtered at level.

    The library itself only calls structlog.get_logger(); the host
    application decides where output goes.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
