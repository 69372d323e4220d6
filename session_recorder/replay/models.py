"""Data models for session replay."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ReplayOptions:
    """Options for verification replay.

    Attributes:
        verify_results: Compare each replayed result against the recorded one
        capture_new_data: Snapshot the page after page-state-changing actions
        compare_page_content: Use the deep comparator (url, title, content length)
        stop_on_error: Abort at the first failing action
        delay_between_actions: Pause in milliseconds (engine default if None)
    """

    verify_results: bool = True
    capture_new_data: bool = False
    compare_page_content: bool = False
    stop_on_error: bool = False
    delay_between_actions: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "ReplayOptions":
        """Build options from a camelCase tool argument mapping."""
        delay = data.get("delayBetweenActions")
        return cls(
            verify_results=bool(data.get("verifyResults", True)),
            capture_new_data=bool(data.get("captureNewData", False)),
            compare_page_content=bool(data.get("comparePageContent", False)),
            stop_on_error=bool(data.get("stopOnError", False)),
            delay_between_actions=int(delay) if delay is not None else None,
        )


@dataclass
class ComparisonResult:
    """Outcome of comparing a recorded result with a replayed one."""

    match: bool
    differences: Optional[dict] = None


@dataclass
class ActionComparison:
    """Comparison entry for one replayed action."""

    action_id: str
    tool: str
    match: bool
    differences: Optional[dict] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "actionId": self.action_id,
            "tool": self.tool,
            "match": self.match,
        }
        if self.differences is not None:
            data["differences"] = self.differences
        return data


@dataclass
class ReplayResult:
    """Result of replaying a session on a fresh instance.

    ``instance_id`` is set whenever an instance was created, even if the
    replay failed, so the caller can inspect or close it.
    """

    success: bool
    instance_id: Optional[str] = None
    errors: list[str] = field(default_factory=list)
    comparison: list[ActionComparison] = field(default_factory=list)
    snapshots: dict[str, Optional[dict]] = field(default_factory=dict)
    actions_replayed: int = 0

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "success": self.success,
            "actionsReplayed": self.actions_replayed,
        }
        if self.instance_id is not None:
            data["instanceId"] = self.instance_id
        if self.errors:
            data["errors"] = self.errors
        if self.comparison:
            data["comparison"] = [entry.to_dict() for entry in self.comparison]
        if self.snapshots:
            data["snapshots"] = self.snapshots
        return data
