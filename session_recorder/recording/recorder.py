"""Recording tool surface - records every tool call made through it.

Wraps any ToolExecutor. The wrapped call's outcome is returned untouched;
recording happens afterwards and is best-effort, so a recording failure can
never change or fail the browser call it observes.
"""

import time
from typing import Any, Optional

import structlog

from .capabilities import ToolExecutor
from .models import InstanceConfig, ToolResult
from .sanitizer import SCREENSHOT_PLACEHOLDER
from .store import SessionStore
from .tools import ToolName

logger = structlog.get_logger()

# Payloads the tool surface never hands to the log, whatever the capture mode.
_RECORDED_PLACEHOLDERS = {
    ToolName.SCREENSHOT.value: {"screenshot": SCREENSHOT_PLACEHOLDER},
    ToolName.GET_MARKDOWN.value: {"markdown": "[TRUNCATED]"},
}


class RecordingToolSurface:
    """ToolExecutor that records each invocation into the session store.

    Usage:
        tools = RecordingToolSurface(browser_tools, store)
        result = await tools.execute_tool(
            "browser_navigate", {"instanceId": "inst-1", "url": "https://example.com"}
        )
    """

    def __init__(self, tools: ToolExecutor, store: SessionStore):
        self.tools = tools
        self.store = store
        self.log = logger.bind(component="recording_tool_surface")

    async def execute_tool(self, name: str, parameters: Optional[dict] = None) -> ToolResult:
        parameters = dict(parameters or {})

        started = time.perf_counter()
        try:
            result = ToolResult.from_value(await self.tools.execute_tool(name, parameters))
        except Exception as e:
            duration = int((time.perf_counter() - started) * 1000)
            await self._record(name, parameters, ToolResult.fail(str(e)), duration)
            raise
        duration = int((time.perf_counter() - started) * 1000)

        await self._record(name, parameters, result, duration)
        return result

    async def _record(self, name: str, parameters: dict, result: ToolResult, duration: int) -> None:
        try:
            if name == ToolName.CREATE_INSTANCE.value:
                await self._record_creation(parameters, result, duration)
                return

            instance_id = parameters.get("instanceId")
            if not instance_id:
                return

            if name == ToolName.CLOSE_INSTANCE.value:
                await self.store.end_session(instance_id)
                return

            recorded_result = None
            if result.success:
                recorded_result = _RECORDED_PLACEHOLDERS.get(name, result.data)

            await self.store.record_action(
                instance_id,
                tool=name,
                parameters=parameters,
                result=recorded_result,
                error=result.error,
                duration=duration,
            )
        except Exception as e:
            self.log.warning("Failed to record action", tool=name, error=str(e))

    async def _record_creation(self, parameters: dict, result: ToolResult, duration: int) -> None:
        if not result.success or not isinstance(result.data, dict):
            return
        instance_id = result.data.get("instanceId")
        if not instance_id:
            return

        # The pool may already have opened a session for the new instance.
        existing = self.store.get_session(instance_id)
        if existing is None or not existing.is_open:
            await self.store.start_session(
                instance_id,
                InstanceConfig.from_dict(parameters),
                metadata=parameters.get("metadata"),
            )

        await self.store.record_action(
            instance_id,
            tool=ToolName.CREATE_INSTANCE.value,
            parameters=parameters,
            result=result.data,
            duration=duration,
        )
