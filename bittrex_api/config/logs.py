"""Logging setup for applications using the client."""

import logging

from rich.logging import RichHandler

LOGGER_NAME = "bittrex_api"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Attach a rich console handler to the package logger.

    Calling it again only adjusts the level.

    Args:
        verbose: Log at DEBUG instead of INFO

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)

    return logger
