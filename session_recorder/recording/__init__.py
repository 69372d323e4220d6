"""Session recording - structured, replayable logs of browser tool calls.

Every tool invocation against a browser instance becomes an ActionRecord
appended to that instance's Session. Parameters and results pass through
the CapturePolicy first (secrets redacted, large payloads truncated unless
full page-data capture is on). Sessions persist as JSON documents.
"""

from .capabilities import InstancePool, ToolExecutor
from .errors import InvalidSessionFileError, SessionNotFoundError, SessionRecorderError
from .models import (
    SESSION_FORMAT_VERSION,
    ActionRecord,
    InstanceConfig,
    SavedSession,
    Session,
    SessionConfig,
    SessionStats,
    ToolResult,
)
from .recorder import RecordingToolSurface
from .sanitizer import CapturePolicy
from .store import SessionStore
from .tools import ToolName, parse_tool_params

__all__ = [
    # Models
    "ActionRecord",
    "Session",
    "SessionConfig",
    "InstanceConfig",
    "SavedSession",
    "SessionStats",
    "ToolResult",
    "SESSION_FORMAT_VERSION",
    # Errors
    "SessionRecorderError",
    "SessionNotFoundError",
    "InvalidSessionFileError",
    # Capabilities
    "InstancePool",
    "ToolExecutor",
    # Recording
    "CapturePolicy",
    "SessionStore",
    "RecordingToolSurface",
    "ToolName",
    "parse_tool_params",
]
