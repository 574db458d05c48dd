"""Root logger configuration for scripts and services embedding the engines."""

import logging
import os

LOG_FORMAT = '%(asctime)s %(name)-12s: %(levelname)-8s %(message)s'

_logging_configured = False


def setup_logging(level=None) -> None:
    """
    Attach a console handler to the root logger, once per process.

    The level defaults to LOG_LEVEL from the environment, then INFO.
    An already configured root logger is left alone.
    """
    global _logging_configured
    if _logging_configured:
        return

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    root = logging.getLogger()
    if not root.handlers:
        root.setLevel(logging.DEBUG)

        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(console)

    _logging_configured = True
