"""Data models for recorded browser sessions.

A Session is the ordered log of every tool invocation made against one
browser instance. Sessions are persisted as JSON documents whose keys are
camelCase (``instanceId``, ``startedAt``, ``pageData``...) so that files
written by other recorders of the same format load unchanged.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Optional

from .errors import InvalidSessionFileError

# Written into every persisted document; documents without it are read as 1.
SESSION_FORMAT_VERSION = 1


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class ToolResult:
    """Uniform outcome of a tool call: success flag, payload, error."""

    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ToolResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)

    @classmethod
    def from_value(cls, value: Any) -> "ToolResult":
        """Coerce whatever a collaborator returned into a ToolResult.

        Accepts ToolResult instances and ``{success, data, error}`` mappings.
        Any other non-None value is treated as a successful payload.
        """
        if isinstance(value, ToolResult):
            return value
        if value is None:
            return cls.fail("Tool returned no result")
        if isinstance(value, Mapping) and "success" in value:
            return cls(
                success=bool(value.get("success")),
                data=value.get("data"),
                error=value.get("error"),
            )
        return cls.ok(value)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class SessionConfig:
    """Environment snapshot stored with a session (immutable once started)."""

    headless: Optional[bool] = None
    viewport: Optional[dict] = None  # {"width": int, "height": int}
    user_agent: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.headless is not None:
            data["headless"] = self.headless
        if self.viewport is not None:
            data["viewport"] = self.viewport
        if self.user_agent is not None:
            data["userAgent"] = self.user_agent
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> "SessionConfig":
        return cls(
            headless=data.get("headless"),
            viewport=data.get("viewport"),
            user_agent=data.get("userAgent", data.get("user_agent")),
        )


@dataclass
class InstanceConfig:
    """Configuration used to create a browser instance."""

    browser_type: str = "chromium"
    headless: Optional[bool] = None
    viewport: Optional[dict] = None
    user_agent: Optional[str] = None

    def to_dict(self) -> dict:
        """Render in the shape the instance pool's ``create_instance`` takes."""
        data: dict[str, Any] = {"browserType": self.browser_type}
        data.update(self.session_config().to_dict())
        return data

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            headless=self.headless,
            viewport=self.viewport,
            user_agent=self.user_agent,
        )

    @classmethod
    def from_dict(cls, data: Mapping) -> "InstanceConfig":
        return cls(
            browser_type=data.get("browserType", data.get("browser_type")) or "chromium",
            headless=data.get("headless"),
            viewport=data.get("viewport"),
            user_agent=data.get("userAgent", data.get("user_agent")),
        )


@dataclass
class ActionRecord:
    """One recorded tool invocation."""

    id: str
    timestamp: str
    tool: str
    parameters: Any = field(default_factory=dict)
    result: Any = None
    error: Optional[str] = None
    duration: Optional[int] = None  # Milliseconds
    metadata: Optional[dict] = None
    page_data: Optional[dict] = None

    def outcome(self) -> ToolResult:
        """The recorded outcome in ToolResult form, for comparison with a replay."""
        return ToolResult(success=self.error is None, data=self.result, error=self.error)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "tool": self.tool,
            "parameters": self.parameters,
        }
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        if self.duration is not None:
            data["duration"] = self.duration
        if self.metadata is not None:
            data["metadata"] = self.metadata
        if self.page_data is not None:
            data["pageData"] = self.page_data
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "ActionRecord":
        if not isinstance(data, Mapping):
            raise InvalidSessionFileError("Action entry is not an object")
        for key in ("id", "timestamp", "tool"):
            if not isinstance(data.get(key), str):
                raise InvalidSessionFileError(f"Action entry is missing string field '{key}'")
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            tool=data["tool"],
            parameters=data.get("parameters", {}),
            result=data.get("result"),
            error=data.get("error"),
            duration=data.get("duration"),
            metadata=data.get("metadata"),
            page_data=data.get("pageData"),
        )


@dataclass
class Session:
    """The recorded lifetime of one browser instance."""

    id: str
    instance_id: str
    browser_type: str
    started_at: str
    ended_at: Optional[str] = None
    actions: list[ActionRecord] = field(default_factory=list)
    metadata: Optional[dict] = None
    config: SessionConfig = field(default_factory=SessionConfig)

    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    @property
    def action_count(self) -> int:
        return len(self.actions)

    def instance_config(self) -> InstanceConfig:
        """The configuration needed to recreate this session's instance."""
        return InstanceConfig(
            browser_type=self.browser_type,
            headless=self.config.headless,
            viewport=self.config.viewport,
            user_agent=self.config.user_agent,
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "formatVersion": SESSION_FORMAT_VERSION,
            "id": self.id,
            "instanceId": self.instance_id,
            "browserType": self.browser_type,
            "startedAt": self.started_at,
        }
        if self.ended_at is not None:
            data["endedAt"] = self.ended_at
        data["actions"] = [action.to_dict() for action in self.actions]
        if self.metadata is not None:
            data["metadata"] = self.metadata
        data["config"] = self.config.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Session":
        """Build a Session from a parsed document, validating required fields.

        Raises:
            InvalidSessionFileError: If the document is not a session of a
                supported format version.
        """
        if not isinstance(data, Mapping):
            raise InvalidSessionFileError("Session document is not an object")

        version = data.get("formatVersion", 1)
        if not isinstance(version, int) or version < 1 or version > SESSION_FORMAT_VERSION:
            raise InvalidSessionFileError(f"Unsupported session format version: {version!r}")

        for key in ("id", "instanceId", "browserType", "startedAt"):
            if not isinstance(data.get(key), str):
                raise InvalidSessionFileError(f"Session document is missing string field '{key}'")

        actions = data.get("actions")
        if not isinstance(actions, list):
            raise InvalidSessionFileError("Session document is missing the 'actions' list")

        config = data.get("config") or {}
        if not isinstance(config, Mapping):
            raise InvalidSessionFileError("Session 'config' must be an object")

        return cls(
            id=data["id"],
            instance_id=data["instanceId"],
            browser_type=data["browserType"],
            started_at=data["startedAt"],
            ended_at=data.get("endedAt"),
            actions=[ActionRecord.from_dict(action) for action in actions],
            metadata=data.get("metadata"),
            config=SessionConfig.from_dict(config),
        )


@dataclass
class SavedSession:
    """A session found on disk together with its file name."""

    filename: str
    session: Session

    def to_dict(self) -> dict:
        return {"filename": self.filename, "session": self.session.to_dict()}


@dataclass
class SessionStats:
    """Summary of one session's activity."""

    total_actions: int
    duration_ms: int
    tool_usage: dict[str, int] = field(default_factory=dict)
    error_count: int = 0

    def to_dict(self) -> dict:
        return {
            "totalActions": self.total_actions,
            "duration": self.duration_ms,
            "toolUsage": self.tool_usage,
            "errorCount": self.error_count,
        }
