"""structlog setup for processes that embed a pool."""

import logging

import structlog


def configure_logging(verbose: bool = False, json: bool = False) -> None:
    """Configure structlog for console or JSON output.

    Args:
        verbose: Emit debug events (commits, ledger refusals)
        json: Render one JSON object per line instead of the console format
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
