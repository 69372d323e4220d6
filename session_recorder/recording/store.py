"""Session store - in-memory session table with JSON persistence.

The store owns the mapping from browser instance id to its open session.
Every recorded action goes through the store's CapturePolicy before it is
appended. Closed sessions stay in memory for a grace period so they can
still be exported or replayed, then they are evicted; files on disk are
never removed by the store.
"""

import asyncio
import json
import os
import re
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Optional, Union
from uuid import uuid4

import structlog

from ..config import Settings, get_settings
from .errors import InvalidSessionFileError, SessionNotFoundError
from .models import (
    ActionRecord,
    InstanceConfig,
    SavedSession,
    Session,
    SessionStats,
    parse_iso,
    utc_now_iso,
)
from .sanitizer import CapturePolicy

logger = structlog.get_logger()

SessionRef = Union[Session, str, Path]


def filesystem_safe_timestamp(timestamp: str) -> str:
    """Replace characters that are awkward in file names (``:`` and ``.``)."""
    return re.sub(r"[:.]", "-", timestamp)


def session_filename(session: Session) -> str:
    """File name for a session; stable for the whole life of the session."""
    return f"session_{session.id}_{filesystem_safe_timestamp(session.started_at)}.json"


def looks_like_path(ref: str) -> bool:
    """Whether a session reference should be treated as a file path."""
    return "/" in ref or os.sep in ref or ref.endswith(".json")


class SessionStore:
    """Authoritative store of recorded sessions.

    Example:
        store = SessionStore(sessions_dir="./sessions")

        session_id = await store.start_session("inst-1", InstanceConfig(headless=True))
        await store.record_action(
            "inst-1",
            tool="browser_navigate",
            parameters={"instanceId": "inst-1", "url": "https://example.com"},
            result={"url": "https://example.com", "title": "Example Domain"},
        )
        await store.end_session("inst-1")
    """

    def __init__(
        self,
        sessions_dir: Union[str, Path] = "./sessions",
        auto_save: bool = True,
        recording_enabled: bool = True,
        capture_full_page_data: bool = True,
        eviction_grace_seconds: float = 60.0,
    ):
        self.sessions_dir = Path(sessions_dir).expanduser()
        self.auto_save = auto_save
        self.eviction_grace_seconds = eviction_grace_seconds
        self.policy = CapturePolicy(capture_full_page_data=capture_full_page_data)
        self._recording_enabled = recording_enabled
        self._sessions: dict[str, Session] = {}
        self._eviction_handles: dict[str, asyncio.TimerHandle] = {}
        self.log = logger.bind(component="session_store")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SessionStore":
        """Build a store configured from application settings."""
        settings = settings or get_settings()
        return cls(
            sessions_dir=settings.sessions_dir,
            auto_save=settings.auto_save,
            recording_enabled=settings.recording_enabled,
            capture_full_page_data=settings.capture_full_page_data,
            eviction_grace_seconds=settings.eviction_grace_seconds,
        )

    # ------------------------------------------------------------------
    # Capture policy toggles
    # ------------------------------------------------------------------

    def set_recording_enabled(self, enabled: bool) -> None:
        self._recording_enabled = enabled
        self.log.info("Recording toggled", enabled=enabled)

    def is_recording_enabled(self) -> bool:
        return self._recording_enabled

    def set_capture_full_page_data(self, enabled: bool) -> None:
        self.policy.capture_full_page_data = enabled
        self.log.info("Full page-data capture toggled", enabled=enabled)

    def is_capturing_full_page_data(self) -> bool:
        return self.policy.capture_full_page_data

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start_session(
        self,
        instance_id: str,
        config: Union[InstanceConfig, Mapping, None] = None,
        metadata: Optional[dict] = None,
    ) -> str:
        """Open a session for a newly created instance.

        Returns:
            The new session id, or an empty string if recording is disabled.
        """
        if not self._recording_enabled:
            return ""

        if config is None:
            config = InstanceConfig()
        elif isinstance(config, Mapping):
            config = InstanceConfig.from_dict(config)

        previous = self._sessions.get(instance_id)
        if previous is not None and previous.is_open:
            self.log.warning(
                "Overwriting open session for instance",
                instance_id=instance_id,
                previous_session_id=previous.id,
            )

        session = Session(
            id=str(uuid4()),
            instance_id=instance_id,
            browser_type=config.browser_type,
            started_at=utc_now_iso(),
            metadata=metadata,
            config=config.session_config(),
        )
        self._sessions[instance_id] = session
        self.log.info(
            "Session started",
            session_id=session.id,
            instance_id=instance_id,
            browser_type=session.browser_type,
        )

        await self._autosave(session)
        return session.id

    async def record_action(
        self,
        instance_id: str,
        tool: str,
        parameters: Any = None,
        result: Any = None,
        error: Optional[str] = None,
        metadata: Optional[dict] = None,
        page_data: Optional[dict] = None,
        duration: Optional[int] = None,
    ) -> Optional[ActionRecord]:
        """Append one tool invocation to the instance's open session.

        A no-op (returning None) when recording is disabled or the instance
        has no open session. Never raises for persistence problems.
        """
        if not self._recording_enabled:
            return None

        session = self._sessions.get(instance_id)
        if session is None or not session.is_open:
            return None

        started = time.perf_counter()
        record = ActionRecord(
            id=str(uuid4()),
            timestamp=utc_now_iso(),
            tool=tool,
            parameters=self.policy.sanitize_parameters(parameters if parameters is not None else {}),
            result=self.policy.process_result(result, tool) if result is not None else None,
            error=error,
            metadata=metadata,
            page_data=page_data,
        )
        record.duration = duration if duration is not None else int((time.perf_counter() - started) * 1000)

        session.actions.append(record)
        self.log.debug(
            "Action recorded",
            session_id=session.id,
            tool=tool,
            sequence=len(session.actions),
            failed=error is not None,
        )

        await self._autosave(session)
        return record

    async def end_session(self, instance_id: str) -> Optional[Session]:
        """Close the instance's session and schedule its eviction from memory."""
        if not self._recording_enabled:
            return None

        session = self._sessions.get(instance_id)
        if session is None or not session.is_open:
            return None

        session.ended_at = utc_now_iso()
        self.log.info(
            "Session ended",
            session_id=session.id,
            instance_id=instance_id,
            action_count=session.action_count,
        )

        await self._autosave(session)
        self._schedule_eviction(instance_id, session)
        return session

    def _schedule_eviction(self, instance_id: str, session: Session) -> None:
        loop = asyncio.get_running_loop()
        self._eviction_handles[session.id] = loop.call_later(
            self.eviction_grace_seconds,
            self._evict,
            instance_id,
            session.id,
        )

    def _evict(self, instance_id: str, session_id: str) -> None:
        self._eviction_handles.pop(session_id, None)
        current = self._sessions.get(instance_id)
        # A newer session may have taken over the instance id meanwhile.
        if current is not None and current.id == session_id:
            del self._sessions[instance_id]
            self.log.debug("Session evicted from memory", session_id=session_id)

    def clear_sessions(self) -> None:
        """Drop every in-memory session and pending eviction."""
        for handle in self._eviction_handles.values():
            handle.cancel()
        self._eviction_handles.clear()
        self._sessions.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_session(self, instance_id: str) -> Optional[Session]:
        return self._sessions.get(instance_id)

    def get_all_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def find_resident_session(self, session_id: str) -> Optional[Session]:
        """Find an in-memory session by its session id."""
        for session in self._sessions.values():
            if session.id == session_id:
                return session
        return None

    def get_session_stats(self, instance_id: str) -> Optional[SessionStats]:
        session = self._sessions.get(instance_id)
        if session is None:
            return None

        tool_usage: dict[str, int] = {}
        error_count = 0
        for action in session.actions:
            tool_usage[action.tool] = tool_usage.get(action.tool, 0) + 1
            if action.error:
                error_count += 1

        end = parse_iso(session.ended_at) if session.ended_at else datetime.now(UTC)
        duration = end - parse_iso(session.started_at)

        return SessionStats(
            total_actions=len(session.actions),
            duration_ms=int(duration.total_seconds() * 1000),
            tool_usage=tool_usage,
            error_count=error_count,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def save_session(self, instance_id: str) -> Path:
        """Persist the instance's session and return the file path.

        Raises:
            SessionNotFoundError: If the instance has no session in memory.
        """
        session = self._sessions.get(instance_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found for instance: {instance_id}")
        return await self.write_session(session)

    async def write_session(self, session: Session) -> Path:
        """Write a session as one indented JSON document."""
        path = self.sessions_dir / session_filename(session)
        payload = json.dumps(session.to_dict(), indent=2, ensure_ascii=False)
        await asyncio.to_thread(self._write_file, path, payload)
        return path

    @staticmethod
    def _write_file(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")

    async def _autosave(self, session: Session) -> None:
        if not self.auto_save:
            return
        try:
            await self.write_session(session)
        except (OSError, TypeError, ValueError) as e:
            self.log.warning("Auto-save failed", session_id=session.id, error=str(e))

    async def load_session(self, path: Union[str, Path]) -> Session:
        """Read a session file.

        Raises:
            InvalidSessionFileError: If the file is not valid JSON or not a
                session document.
            OSError: If the file cannot be read.
        """
        path = Path(path).expanduser()
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidSessionFileError(f"Malformed session file {path}: {e}", path=str(path)) from e

        try:
            return Session.from_dict(data)
        except InvalidSessionFileError as e:
            e.path = str(path)
            raise

    async def list_saved_sessions(self) -> list[SavedSession]:
        """Load every session file in the sessions directory.

        Files that cannot be read or parsed are logged and skipped.
        """
        if not self.sessions_dir.is_dir():
            return []

        paths = await asyncio.to_thread(lambda: sorted(self.sessions_dir.glob("*.json")))
        saved: list[SavedSession] = []
        for path in paths:
            try:
                session = await self.load_session(path)
            except (OSError, ValueError) as e:
                self.log.warning("Skipping unreadable session file", filename=path.name, error=str(e))
                continue
            saved.append(SavedSession(filename=path.name, session=session))
        return saved

    async def find_saved_session(self, session_id: str) -> Optional[Session]:
        """Find a persisted session by its session id."""
        for item in await self.list_saved_sessions():
            if item.session.id == session_id:
                return item.session
        return None

    async def resolve_session(self, ref: SessionRef) -> Session:
        """Resolve a session object, file path or session id to a Session.

        Paths are loaded from disk. Ids are looked up among resident
        sessions first and then among saved session files.

        Raises:
            SessionNotFoundError: If nothing matches the reference.
        """
        if isinstance(ref, Session):
            return ref

        if isinstance(ref, Path) or looks_like_path(ref):
            try:
                return await self.load_session(ref)
            except FileNotFoundError as e:
                raise SessionNotFoundError(f"Session file not found: {ref}") from e

        session = self.find_resident_session(ref)
        if session is None:
            session = await self.find_saved_session(ref)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {ref}")
        return session
