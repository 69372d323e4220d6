"""Logging setup for the session recorder.

Modules log through ``structlog.get_logger()`` and bind a ``component``.
This module routes those events to stderr once, at process start, and
scopes replay identifiers onto everything logged while a replay runs.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    include_timestamp: bool = True,
) -> None:
    """Send structlog events through a stderr handler.

    Args:
        level: Standard level name, case-insensitive
        json_format: Render one JSON object per event instead of console lines
        include_timestamp: Add an ISO ``timestamp`` key to each event

    Raises:
        ValueError: If ``level`` is not a standard level name
    """
    number = _level_number(level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=number)
    logging.getLogger().setLevel(number)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(structlog.processors.StackInfoRenderer())

    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def replay_context(session_id: str, replay_instance_id: str) -> Iterator[None]:
    """Tag every event logged inside the block with the replayed session and
    the instance it is replayed on."""
    with structlog.contextvars.bound_contextvars(
        session_id=session_id,
        replay_instance_id=replay_instance_id,
    ):
        yield
