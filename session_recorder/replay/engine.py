"""Replay Engine - re-runs a recorded session on a fresh browser instance."""

import asyncio
from collections.abc import Mapping
from typing import Any, Optional

import structlog

from ..config import get_settings
from ..recording.capabilities import InstancePool, ToolExecutor
from ..recording.models import ActionRecord, Session, ToolResult
from ..recording.store import SessionRef, SessionStore
from ..recording.tools import PAGE_STATE_TOOLS, ToolName
from ..utils.logging import replay_context
from .comparator import compare_results
from .models import ActionComparison, ReplayOptions, ReplayResult
from .snapshot import capture_page_data

logger = structlog.get_logger()


class ReplayEngine:
    """Replays recorded sessions against a new browser instance.

    The engine:
    1. Creates one instance with the session's browser type and config
    2. Re-invokes every recorded tool in order, with the new instance id
    3. Pauses between actions to let dynamic pages settle
    4. Collects failures instead of raising

    Example:
        engine = ReplayEngine(store, pool, tools)

        result = await engine.replay_session("./sessions/session_abc.json")
        if not result.success:
            print(result.errors)
        await pool.close_instance(result.instance_id)
    """

    def __init__(
        self,
        store: SessionStore,
        pool: InstancePool,
        tools: ToolExecutor,
        delay_ms: Optional[int] = None,
    ):
        self.store = store
        self.pool = pool
        self.tools = tools
        self.delay_ms = delay_ms if delay_ms is not None else get_settings().replay_delay_ms
        self.log = logger.bind(component="replay_engine")

    async def replay_session(self, session: SessionRef) -> ReplayResult:
        """Replay every recorded action, continuing past failures.

        Args:
            session: Session object, session file path or session id

        Returns:
            ReplayResult; ``success`` is True only if no action failed
        """
        try:
            session = await self.store.resolve_session(session)
        except Exception as e:
            return ReplayResult(success=False, errors=[f"Replay failed: {e}"])

        instance_id, create_error = await self._create_instance(session)
        if create_error:
            return ReplayResult(success=False, errors=[create_error])

        errors: list[str] = []
        replayed = 0

        with replay_context(session.id, instance_id):
            self.log.info("Replay started", action_count=session.action_count)

            for index, action in enumerate(self._replayable(session)):
                if index:
                    await self._pause(self.delay_ms)
                try:
                    result = await self._invoke(action, instance_id)
                    if not result.success:
                        errors.append(f"Action {action.id} failed: {result.error}")
                except Exception as e:
                    errors.append(f"Action {action.id} error: {e}")
                replayed += 1

            self.log.info("Replay finished", actions_replayed=replayed, error_count=len(errors))

        return ReplayResult(
            success=not errors,
            instance_id=instance_id,
            errors=errors,
            actions_replayed=replayed,
        )

    async def replay_session_with_verification(
        self,
        session: SessionRef,
        options: Optional[ReplayOptions] = None,
    ) -> ReplayResult:
        """Replay with optional result verification and page snapshots.

        Args:
            session: Session object, session file path or session id
            options: Verification options (defaults: verify results, shallow)

        Returns:
            ReplayResult with comparison entries and captured snapshots
        """
        options = options or ReplayOptions()
        delay = options.delay_between_actions if options.delay_between_actions is not None else self.delay_ms

        try:
            session = await self.store.resolve_session(session)
        except Exception as e:
            return ReplayResult(success=False, errors=[f"Replay failed: {e}"])

        instance_id, create_error = await self._create_instance(session)
        if create_error:
            return ReplayResult(success=False, errors=[create_error])

        errors: list[str] = []
        comparison: list[ActionComparison] = []
        snapshots: dict[str, Optional[dict]] = {}
        replayed = 0

        with replay_context(session.id, instance_id):
            self.log.info(
                "Verification replay started",
                action_count=session.action_count,
                verify_results=options.verify_results,
                compare_page_content=options.compare_page_content,
                stop_on_error=options.stop_on_error,
            )

            for index, action in enumerate(self._replayable(session)):
                if index:
                    await self._pause(delay)
                replayed += 1
                try:
                    result = await self._invoke(action, instance_id)

                    if not result.success:
                        errors.append(f"Action {index + 1} ({action.tool}) failed: {result.error}")
                        if options.stop_on_error:
                            break

                    if options.verify_results and action.result is not None:
                        outcome = compare_results(action.outcome(), result, options.compare_page_content)
                        comparison.append(ActionComparison(
                            action_id=action.id,
                            tool=action.tool,
                            match=outcome.match,
                            differences=outcome.differences,
                        ))

                    if options.capture_new_data and action.tool in PAGE_STATE_TOOLS:
                        action.page_data = await capture_page_data(self.pool, instance_id)
                        snapshots[action.id] = action.page_data

                except Exception as e:
                    errors.append(f"Action {index + 1} ({action.tool}) error: {e}")
                    if options.stop_on_error:
                        break

            self.log.info(
                "Verification replay finished",
                actions_replayed=replayed,
                error_count=len(errors),
                mismatches=sum(1 for entry in comparison if not entry.match),
            )

        return ReplayResult(
            success=not errors,
            instance_id=instance_id,
            errors=errors,
            comparison=comparison,
            snapshots=snapshots,
            actions_replayed=replayed,
        )

    @staticmethod
    def _replayable(session: Session) -> list[ActionRecord]:
        # The replay creates its own instance.
        return [action for action in session.actions if action.tool != ToolName.CREATE_INSTANCE.value]

    async def _create_instance(self, session: Session) -> tuple[Optional[str], Optional[str]]:
        """Create the replay instance; returns (instance_id, error)."""
        try:
            raw = await self.pool.create_instance(session.instance_config().to_dict(), session.metadata)
        except Exception as e:
            self.log.error("Replay instance creation raised", session_id=session.id, error=str(e))
            return None, f"Failed to create instance: {e}"

        result = ToolResult.from_value(raw)
        instance_id = None
        if result.success and isinstance(result.data, Mapping):
            instance_id = result.data.get("instanceId")

        if not instance_id:
            reason = result.error or "no instance id returned"
            self.log.error("Replay instance creation failed", session_id=session.id, error=reason)
            return None, f"Failed to create instance: {reason}"

        return instance_id, None

    async def _invoke(self, action: ActionRecord, instance_id: str) -> ToolResult:
        params: dict[str, Any] = dict(action.parameters) if isinstance(action.parameters, Mapping) else {}
        params["instanceId"] = instance_id
        return ToolResult.from_value(await self.tools.execute_tool(action.tool, params))

    @staticmethod
    async def _pause(delay_ms: int) -> None:
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)
