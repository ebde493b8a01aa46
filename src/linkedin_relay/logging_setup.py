# ABOUTME: One-time logging configuration for the CLI, rendered through rich.
# ABOUTME: Library modules only create module loggers; the host application calls init_logging.

import logging

from rich.console import Console
from rich.logging import RichHandler

from linkedin_relay.config import get_settings

_INITIALIZED: bool = False


def init_logging(level: str | None = None, console: Console | None = None) -> None:
    """Install a RichHandler on the root logger once.

    Later calls are no-ops so repeated CLI invocations in one process (as in
    tests) do not stack handlers.

    Args:
        level: Level name; defaults to the configured log level.
        console: Console to write to; defaults to stderr.
    """
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level_str = (level or get_settings().log_level).upper()
    log_level = getattr(logging, log_level_str, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    _INITIALIZED = True


def reset_logging() -> None:
    """Remove installed RichHandlers and allow init_logging to run again."""
    global _INITIALIZED
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    _INITIALIZED = False
