"""Utility modules for the session recorder.

Provides:
- Structured logging configuration
- Replay-scoped logging context
"""

from .logging import configure_logging, replay_context

__all__ = [
    "configure_logging",
    "replay_context",
]
